"""Lectura del catálogo de bancos desde el select de institución emisora."""

from typing import Dict

from playwright.async_api import Page

from config.banxico_selectors import BANK_SELECT_ID


READ_OPTIONS_JS = """
(id) => {
    const select = document.getElementById(id);
    const options = {};
    if (!select) return options;
    Array.from(select.options).forEach(option => {
        if (option.value) {
            options[option.value] = option.textContent.trim();
        }
    });
    return options;
}
"""


def populated_selector(select_id: str = BANK_SELECT_ID) -> str:
    """Selector que solo existe cuando el select ya tiene opciones con valor."""
    return f'#{select_id} option[value]:not([value=""])'


async def read_bank_options(page: Page, select_id: str = BANK_SELECT_ID) -> Dict[str, str]:
    """
    Lee las opciones del select como código → nombre del banco.

    Las opciones con valor vacío (placeholder) se omiten.
    """
    return await page.evaluate(READ_OPTIONS_JS, select_id)


async def wait_for_bank_options(page: Page, select_id: str = BANK_SELECT_ID, timeout: int = 30000) -> Dict[str, str]:
    """Espera a que el select se llene y devuelve sus opciones."""
    await page.wait_for_selector(populated_selector(select_id), state="attached", timeout=timeout)
    return await read_bank_options(page, select_id)
