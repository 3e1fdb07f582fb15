"""
Selectores y configuración para el formulario CEP de Banxico.
Identificados mediante exploración manual del sitio.

Fuente: https://www.banxico.org.mx/cep/
"""

# ============================================================================
# PÁGINA DE CONSULTA
# ============================================================================

CEP_URL = "https://www.banxico.org.mx/cep/"

FORM_SELECTOR = "#fConsulta"

FORM_FIELD_IDS = {
    "fecha": "input_fecha",
    "tipoCriterio": "input_tipoCriterio",
    "criterio": "input_criterio",
    "emisor": "input_emisor",
    "receptor": "input_receptor",
    "cuenta": "input_cuenta",
    "receptorParticipante": "input_benef_es_part",
    "monto": "input_monto",
    "captcha": "input_captcha",
}

CRITERIO_LABEL_SELECTOR = 'label[for="input_criterio"]'

CRITERIO_LABELS = {
    "T": "Clave de rastreo",
    "R": "Número de referencia",
}

SUBMIT_BUTTON_ID = "btn_Consultar"

# ============================================================================
# MODAL DE RESULTADOS
# ============================================================================

RESULT_MODAL_ID = "divValidacionPertenencia"
RESULT_CONTENT_SELECTOR = "#consultaMISPEI"

BANK_SELECT_ID = FORM_FIELD_IDS["emisor"]

# ============================================================================
# LANZAMIENTO DEL NAVEGADOR
# ============================================================================

VIEWPORT = {"width": 1920, "height": 1080}

FORM_WAIT_TIMEOUT_MS = 15000

CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
    "--disable-background-timer-throttling",
    "--disable-backgrounding-occluded-windows",
    "--disable-renderer-backgrounding",
    "--disable-features=TranslateUI",
    "--disable-web-security",
    "--disable-features=VizDisplayCompositor",
    "--disable-extensions",
    "--disable-plugins",
    "--disable-default-apps",
    "--no-default-browser-check",
    "--disable-popup-blocking",
    "--window-size=1920,1080",
]

BANK_OPTIONS_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
]
