"""
Envío del formulario, espera del modal de resultados y extracción.

La espera no hace polling: un MutationObserver sobre el atributo ``style``
del modal se arma antes del click y se desarma siempre al salir del
``VisibilityWatch``, haya respuesta o timeout.
"""

import asyncio
from typing import Optional, Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from cep_query.exceptions import SubmitButtonError, VisibilityTimeout
from cep_query.models import (
    PRODUCTION_TIMINGS, ErrorResult, FlowTimings, TableResult, TextResult, parse_query_result,
)
from config.banxico_selectors import RESULT_CONTENT_SELECTOR, RESULT_MODAL_ID, SUBMIT_BUTTON_ID


ENABLE_SUBMIT_JS = """
(id) => {
    const button = document.getElementById(id);
    if (!button) return false;
    button.classList.remove('disabled');
    button.style.cursor = 'pointer';
    return true;
}
"""

SUBMIT_STATE_JS = """
(id) => {
    const button = document.getElementById(id);
    if (!button) return 'not found';
    if (button.classList.contains('disabled') || button.disabled) return 'disabled';
    return 'ready';
}
"""

CLICK_SUBMIT_JS = """
(id) => document.getElementById(id).click()
"""

ARM_WATCH_JS = """
([id, timeoutMs]) => {
    const previous = window.__cepVisibilityWatch;
    if (previous) {
        previous.observer.disconnect();
        clearTimeout(previous.timer);
        delete window.__cepVisibilityWatch;
    }
    const target = document.getElementById(id);
    if (!target) return false;

    const watch = {};
    watch.promise = new Promise(resolve => {
        watch.observer = new MutationObserver(mutations => {
            for (const mutation of mutations) {
                if (mutation.type === 'attributes' && mutation.attributeName === 'style'
                        && mutation.target.style.display !== 'none') {
                    resolve({ visible: true, display: mutation.target.style.display });
                    return;
                }
            }
        });
        watch.observer.observe(target, { attributes: true, attributeFilter: ['style'] });
        watch.timer = setTimeout(
            () => resolve({ visible: false, display: target.style.display }),
            timeoutMs
        );
    });
    window.__cepVisibilityWatch = watch;
    return true;
}
"""

WAIT_WATCH_JS = """
() => window.__cepVisibilityWatch
    ? window.__cepVisibilityWatch.promise
    : { visible: false, display: '' }
"""

DISARM_WATCH_JS = """
() => {
    const watch = window.__cepVisibilityWatch;
    if (!watch) return false;
    watch.observer.disconnect();
    clearTimeout(watch.timer);
    delete window.__cepVisibilityWatch;
    return true;
}
"""

OBSERVER_ATTACHED_JS = """
() => Boolean(window.__cepVisibilityWatch)
"""

EXTRACT_RESULT_JS = """
([modalId, contentSelector]) => {
    const modal = document.getElementById(modalId);
    if (!modal || modal.style.display === 'none') return null;

    const consulta = document.querySelector(contentSelector);
    if (!consulta) return null;

    const table = consulta.querySelector('table');
    if (!table) {
        return {
            type: 'text',
            content: consulta.textContent.trim(),
            html: consulta.innerHTML
        };
    }

    const cellTexts = row => Array.from(row.querySelectorAll('td, th'))
        .map(cell => cell.textContent.trim());
    const dataRows = rows => rows.map(cellTexts)
        .filter(cells => cells.some(text => text.length > 0));

    const result = { type: 'table', headers: [], rows: [] };

    const thead = table.querySelector('thead');
    if (thead) {
        thead.querySelectorAll('tr').forEach(row => {
            result.headers = result.headers.concat(
                cellTexts(row).filter(text => text.length > 0)
            );
        });
    }

    const tbody = table.querySelector('tbody');
    if (tbody) {
        result.rows = dataRows(Array.from(tbody.querySelectorAll('tr')));
    }
    if (result.rows.length === 0) {
        result.rows = dataRows(Array.from(table.querySelectorAll('tr')));
    }
    return result;
}
"""

EXTRACT_DEGRADED_JS = """
(modalId) => {
    const modal = document.getElementById(modalId);
    if (!modal) return null;
    return {
        type: 'error',
        content: modal.textContent.trim(),
        html: modal.innerHTML,
        display: modal.style.display
    };
}
"""


ResultModel = Union[TableResult, TextResult, ErrorResult]


async def observer_attached(page: Page) -> bool:
    """Indica si quedó un observer de visibilidad armado en la página."""
    return await page.evaluate(OBSERVER_ATTACHED_JS)


class VisibilityWatch:
    """
    Espera acotada a que un elemento deje de estar oculto.

    Uso:
        async with VisibilityWatch(page, "divValidacionPertenencia", 45000) as watch:
            await page.click(...)
            await watch.wait()
    """

    def __init__(self, page: Page, element_id: str, timeout_ms: int):
        self.page = page
        self.element_id = element_id
        self.timeout_ms = timeout_ms
        self.armed = False

    async def __aenter__(self) -> "VisibilityWatch":
        self.armed = await self.page.evaluate(ARM_WATCH_JS, [self.element_id, self.timeout_ms])
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        await self.close()
        return False

    async def wait(self) -> str:
        """
        Suspende hasta que el elemento sea visible o se agote el tiempo.

        Returns:
            Valor de ``style.display`` al hacerse visible

        Raises:
            VisibilityTimeout: Si no hubo transición dentro del tiempo límite
        """
        if not self.armed:
            raise VisibilityTimeout(f"Elemento #{self.element_id} no encontrado para observar")

        outcome = await self.page.evaluate(WAIT_WATCH_JS)
        if not outcome.get("visible"):
            raise VisibilityTimeout(f"Timeout esperando respuesta ({self.timeout_ms} ms)")
        return outcome.get("display", "")

    async def close(self) -> None:
        """Desarma el observer. Se puede llamar más de una vez."""
        try:
            await self.page.evaluate(DISARM_WATCH_JS)
        except PlaywrightError as e:
            # Página cerrada o navegada: el observer ya no existe
            print(f"⚠️  No se pudo desarmar el observer: {e}")
        self.armed = False


class SubmissionController:
    """Envía el formulario y normaliza lo que aparezca en el modal."""

    def __init__(self, page: Page, timings: FlowTimings = PRODUCTION_TIMINGS):
        self.page = page
        self.timings = timings

    async def enable_submit(self) -> bool:
        """Quita la clase ``disabled`` que la página deja aunque el formulario esté completo."""
        enabled = await self.page.evaluate(ENABLE_SUBMIT_JS, SUBMIT_BUTTON_ID)
        if enabled:
            print("✅ Botón de consulta habilitado")
        return enabled

    async def check_submit(self) -> None:
        """
        Raises:
            SubmitButtonError: Si el botón no existe o sigue deshabilitado
        """
        state = await self.page.evaluate(SUBMIT_STATE_JS, SUBMIT_BUTTON_ID)
        if state != "ready":
            raise SubmitButtonError(
                f"No se pudo presionar el botón de consulta: deshabilitado o no encontrado ({state})"
            )

    async def click_submit(self) -> None:
        print("🔄 Presionando botón Consultar...")
        await self.page.evaluate(CLICK_SUBMIT_JS, SUBMIT_BUTTON_ID)

    def watch(self) -> VisibilityWatch:
        return VisibilityWatch(self.page, RESULT_MODAL_ID, self.timings.wait_timeout_ms)

    async def submit(self) -> None:
        """
        Habilita, verifica y presiona el botón, y espera a que aparezca el modal.

        Raises:
            SubmitButtonError: Botón ausente o deshabilitado (no se espera nada)
            VisibilityTimeout: El modal no apareció a tiempo
        """
        await self.enable_submit()
        await self.check_submit()

        async with self.watch() as watch:
            await self.click_submit()
            print("⏳ Esperando modal de respuesta...")
            await watch.wait()

        print("✅ Modal visible, esperando a que cargue el contenido...")
        if self.timings.post_visible_delay:
            await asyncio.sleep(self.timings.post_visible_delay)

    async def extract_result(self) -> Optional[ResultModel]:
        """Extrae la tabla (o el texto) del modal de resultados."""
        raw = await self.page.evaluate(EXTRACT_RESULT_JS, [RESULT_MODAL_ID, RESULT_CONTENT_SELECTOR])
        result = parse_query_result(raw)

        if result is None:
            print("⚠️  Modal o área de consulta no encontrada")
        elif isinstance(result, TableResult):
            print(f"📊 Tabla extraída: {len(result.headers)} encabezados, {len(result.rows)} filas")
        else:
            print("📄 Sin tabla en el modal, se devuelve el texto")
        return result

    async def extract_degraded(self) -> Optional[ErrorResult]:
        """Rescata lo que haya en el modal después de una espera fallida."""
        try:
            raw = await self.page.evaluate(EXTRACT_DEGRADED_JS, RESULT_MODAL_ID)
        except PlaywrightError as e:
            print(f"❌ No se pudo extraer el contenido del error: {e}")
            return None
        return parse_query_result(raw)

    async def submit_and_extract(self) -> Optional[ResultModel]:
        """
        Flujo completo de envío.

        Un botón ausente o deshabilitado es un error duro. Cualquier otra falla
        de la espera (timeout, página recargada o navegada) o de la extracción
        produce el resultado degradado ``error``.
        """
        try:
            await self.submit()
        except (VisibilityTimeout, PlaywrightError) as e:
            print(f"⚠️  Error esperando el modal: {e}")
            return await self.extract_degraded()

        try:
            return await self.extract_result()
        except PlaywrightError as e:
            print(f"⚠️  Error extrayendo el resultado: {e}")
            return await self.extract_degraded()
