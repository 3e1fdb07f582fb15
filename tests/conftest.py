"""
Fixtures compartidas: una página de Chromium con una réplica mínima del
formulario de consulta CEP de Banxico.
"""

import json

import pytest
import pytest_asyncio
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from cep_query.models import FlowTimings


# Réplica del formulario: mismos ids, botón con la clase 'disabled' y el
# modal oculto. Al presionar Consultar, si window.__respuesta está definido,
# se pinta ese HTML en #consultaMISPEI y se muestra el modal.
FORM_HTML = """
<!DOCTYPE html>
<html>
<body>
<form id="fConsulta">
    <input type="text" id="input_fecha" name="fecha">
    <select id="input_tipoCriterio">
        <option value="T">Clave de rastreo</option>
        <option value="R">Número de referencia</option>
    </select>
    <label for="input_criterio">Criterio</label>
    <input type="text" id="input_criterio" maxlength="30">
    <select id="input_emisor">
        <option value="">Seleccione una opción</option>
        <option value="40002">BANAMEX</option>
        <option value="40012">BBVA MEXICO</option>
        <option value="40014">SANTANDER</option>
    </select>
    <select id="input_receptor">
        <option value="">Seleccione una opción</option>
        <option value="40002">BANAMEX</option>
        <option value="40012">BBVA MEXICO</option>
        <option value="40014">SANTANDER</option>
    </select>
    <input type="text" id="input_cuenta">
    <input type="checkbox" id="input_benef_es_part">
    <input type="text" id="input_monto">
    <button type="button" id="btn_Consultar" class="btn disabled">Consultar</button>
</form>

<div id="divValidacionPertenencia" style="display: none;">
    <h4>Resultado de la consulta</h4>
    <div id="consultaMISPEI"></div>
</div>

<script>
    window.__events = [];
    ['input', 'change', 'keyup', 'blur'].forEach(type => {
        document.getElementById('input_fecha')
            .addEventListener(type, () => window.__events.push(type));
    });

    document.getElementById('btn_Consultar').addEventListener('click', () => {
        if (window.__respuesta === undefined) return;
        setTimeout(() => {
            document.getElementById('consultaMISPEI').innerHTML = window.__respuesta;
            document.getElementById('divValidacionPertenencia').style.display = 'block';
        }, 100);
    });
</script>
</body>
</html>
"""

TABLE_RESPONSE = """
<table>
    <thead>
        <tr><th>Fecha</th><th></th><th>Estado</th></tr>
    </thead>
    <tbody>
        <tr><td>03-08-2025</td><td>ABC123</td><td>Liquidado</td></tr>
        <tr><td> </td><td></td><td></td></tr>
    </tbody>
</table>
"""

HEADERLESS_TABLE_RESPONSE = """
<table>
    <tr><td>03-08-2025</td><td>ABC123</td></tr>
    <tr><td></td><td> </td></tr>
    <tr><td>04-08-2025</td><td>XYZ789</td></tr>
</table>
"""

# tbody sin datos: las filas salen de todos los <tr> de la tabla, en orden
BLANK_BODY_TABLE_RESPONSE = """
<table>
    <thead>
        <tr><th>Fecha</th><th>Estado</th></tr>
    </thead>
    <tbody>
        <tr><td> </td><td></td></tr>
    </tbody>
    <tfoot>
        <tr><td>03-08-2025</td><td>Liquidado</td></tr>
        <tr><td>04-08-2025</td><td>Devuelto</td></tr>
    </tfoot>
</table>
"""

TEXT_RESPONSE = "<p>No se encontró información del pago</p>"

VALID_FORM_DATA = {
    "fecha": "03-08-2025",
    "tipoCriterio": "R",
    "criterio": "1234567",
    "emisor": "40002",
    "receptor": "40014",
    "cuenta": "123456789012345678",
    "monto": "1500.00",
}

FAST_TIMINGS = FlowTimings(
    settle_delay=0.0,
    final_settle_delay=0.0,
    wait_timeout_ms=3000,
    post_visible_delay=0.0,
)

SHORT_WAIT_TIMINGS = FlowTimings(
    settle_delay=0.0,
    final_settle_delay=0.0,
    wait_timeout_ms=500,
    post_visible_delay=0.0,
)


@pytest_asyncio.fixture
async def page():
    """Página de Chromium headless; el test se omite si el navegador no está instalado."""
    async with async_playwright() as p:
        try:
            browser = await p.chromium.launch(headless=True)
        except PlaywrightError as e:
            pytest.skip(f"Chromium no disponible: {e}")

        try:
            yield await browser.new_page()
        finally:
            await browser.close()


async def load_form(page, respuesta=None):
    """Carga la réplica del formulario y define la respuesta del modal."""
    await page.set_content(FORM_HTML)
    if respuesta is not None:
        await page.evaluate("(html) => { window.__respuesta = html; }", respuesta)


def write_form_page(directory, respuesta=None):
    """Escribe la réplica del formulario en disco, para flujos que navegan con page.goto()."""
    html = FORM_HTML
    if respuesta is not None:
        html = html.replace(
            "window.__events = [];",
            "window.__events = [];\n    window.__respuesta = " + json.dumps(respuesta) + ";",
        )
    path = directory / "cep.html"
    path.write_text(html, encoding="utf-8")
    return path.as_uri()
