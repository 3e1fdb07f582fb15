"""
Sesión de navegador para la consulta de CEP.

Cada llamada lanza su propio Chromium y lo cierra al terminar, pase lo que
pase. Todo error dentro de la sesión se convierte en un envelope con
``success: false``: quien ejecuta el script siempre recibe exactamente una
línea JSON que comienza con ``{"success"``.
"""

import asyncio
import json
from typing import Any, Awaitable, Callable, Dict, Optional

from playwright.async_api import Page, async_playwright

from cep_query.bank_options import wait_for_bank_options
from cep_query.form_driver import FormDriver
from cep_query.models import PRODUCTION_TIMINGS, BrowserOptions, ExecutionEnvelope, FlowTimings
from cep_query.submission import SubmissionController
from config.banxico_selectors import (
    BANK_OPTIONS_ARGS, CEP_URL, FORM_SELECTOR, FORM_WAIT_TIMEOUT_MS, VIEWPORT,
)


async def run_in_browser(
    browser_options: BrowserOptions,
    url: str,
    work: Callable[[Page], Awaitable[Any]],
) -> ExecutionEnvelope:
    """
    Lanza el navegador, abre ``url`` y ejecuta ``work(page)``.

    Args:
        browser_options: Opciones de lanzamiento
        url: Página a abrir
        work: Corrutina que recibe la página y devuelve el ``data`` del envelope

    Returns:
        ExecutionEnvelope con el resultado de ``work`` o el mensaje del error
    """
    browser = None
    try:
        async with async_playwright() as p:
            try:
                browser = await p.chromium.launch(**browser_options.launch_kwargs())
                page = await browser.new_page(viewport=VIEWPORT)
                page.set_default_timeout(browser_options.timeout)
                await page.goto(url, wait_until="networkidle")

                return ExecutionEnvelope.ok(await work(page))
            finally:
                if browser:
                    await browser.close()
    except Exception as e:
        return ExecutionEnvelope.failure(str(e) or e.__class__.__name__)


async def fill_and_extract(page: Page, form_data: Dict[str, Any], timings: FlowTimings = PRODUCTION_TIMINGS):
    """Flujo de producción sobre una página ya abierta en el formulario."""
    await page.wait_for_selector(FORM_SELECTOR, timeout=FORM_WAIT_TIMEOUT_MS)
    print("✅ Formulario cargado, llenando datos...")

    driver = FormDriver(page, settle_delay=timings.settle_delay)
    await driver.fill_form(form_data)
    print("✅ Llenado secuencial completado")

    if timings.final_settle_delay:
        await asyncio.sleep(timings.final_settle_delay)

    values = await driver.read_values()
    print(f"📋 Valores del formulario: {json.dumps(values, ensure_ascii=False)}")
    if driver.failures:
        print(f"⚠️  Campos con fallas: {json.dumps(driver.failures, ensure_ascii=False)}")

    controller = SubmissionController(page, timings)
    return await controller.submit_and_extract()


async def query_payment(
    form_data: Dict[str, Any],
    options: Optional[Dict[str, Any]] = None,
    timings: FlowTimings = PRODUCTION_TIMINGS,
    url: str = CEP_URL,
) -> ExecutionEnvelope:
    """
    Llena el formulario, lo envía y extrae el resultado del modal.

    Args:
        form_data: Datos del formulario (ya validados por el llamador)
        options: Opciones del navegador (headless, slowMo, timeout, ...)
        timings: Tiempos de espera del flujo
        url: URL de la página de consulta

    Returns:
        ExecutionEnvelope con el resultado (o el error)
    """
    browser_options = BrowserOptions.merged({}, options)
    return await run_in_browser(
        browser_options, url, lambda page: fill_and_extract(page, form_data, timings)
    )


async def fetch_bank_options(options: Optional[Dict[str, Any]] = None, url: str = CEP_URL) -> ExecutionEnvelope:
    """Abre la página y devuelve el catálogo de bancos del select emisor."""
    browser_options = BrowserOptions.merged({"headless": True, "args": BANK_OPTIONS_ARGS}, options)

    async def work(page: Page) -> Dict[str, str]:
        banks = await wait_for_bank_options(page, timeout=browser_options.timeout)
        print(f"🏦 Bancos encontrados: {len(banks)}")
        return banks

    return await run_in_browser(browser_options, url, work)


def emit(envelope: ExecutionEnvelope) -> None:
    print(envelope.to_line(), flush=True)


def run_query(form_data: Dict[str, Any], options: Optional[Dict[str, Any]] = None, url: str = CEP_URL) -> None:
    """Punto de entrada del script generado para una consulta."""
    emit(asyncio.run(query_payment(form_data, options, url=url)))


def run_bank_options(options: Optional[Dict[str, Any]] = None, url: str = CEP_URL) -> None:
    """Punto de entrada del script generado para el catálogo de bancos."""
    emit(asyncio.run(fetch_bank_options(options, url=url)))
