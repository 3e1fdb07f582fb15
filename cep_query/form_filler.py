"""
Módulo reutilizable para llenar y enviar el formulario CEP sobre una página ya abierta.

A diferencia del flujo de producción (``cep_query.session``), aquí un timeout
del modal es un error y no un resultado degradado, y los tiempos son más
cortos (30 s de espera, 1 s después de que el modal aparece).

Ejemplo:
    filler = CEPFormFiller(page)
    result = await filler.fill_and_submit({
        "fecha": "03-08-2025",
        "tipoCriterio": "R",
        "criterio": "1234567",
        "emisor": "40002",
        "receptor": "40014",
    })
"""

from typing import Any, Dict, Mapping, Optional

from playwright.async_api import Page

from cep_query.bank_options import read_bank_options
from cep_query.form_driver import FormDriver
from cep_query.models import MODULE_TIMINGS, FlowTimings
from cep_query.submission import ResultModel, SubmissionController


class CEPFormFiller:
    """Llena, envía y extrae la tabla de respuesta del formulario de Banxico."""

    def __init__(self, page: Page, timings: FlowTimings = MODULE_TIMINGS):
        self.page = page
        self.timings = timings
        self.driver = FormDriver(page, settle_delay=timings.settle_delay)
        self.controller = SubmissionController(page, timings)

    async def fill_form(self, data: Mapping[str, Any]) -> Dict[str, str]:
        return await self.driver.fill_form(data)

    async def enable_submit_button(self) -> bool:
        return await self.controller.enable_submit()

    async def submit_form(self) -> Optional[ResultModel]:
        """
        Envía el formulario y espera el modal.

        Raises:
            SubmitButtonError: Botón ausente o deshabilitado
            VisibilityTimeout: El modal no apareció dentro del tiempo límite
        """
        await self.controller.submit()
        return await self.controller.extract_result()

    async def extract_table_data(self) -> Optional[ResultModel]:
        return await self.controller.extract_result()

    async def get_bank_options(self) -> Dict[str, str]:
        return await read_bank_options(self.page)

    async def fill_and_submit(self, form_data: Mapping[str, Any]) -> Optional[ResultModel]:
        """Llena el formulario y lo envía; los errores se propagan."""
        try:
            await self.fill_form(form_data)
            return await self.submit_form()
        except Exception as e:
            print(f"❌ Error en el envío del formulario: {e}")
            raise
