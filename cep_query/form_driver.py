"""
Llenado del formulario de consulta CEP.

Cada campo se localiza por su id estable y se llena con la estrategia de su
tipo, disparando los eventos que la validación propia de la página escucha.
Entre campo y campo se espera un intervalo fijo: la página recalcula partes
de la UI (y hace peticiones) después de ciertos cambios, y llenar demasiado
rápido deja su estado interno desincronizado de los valores del DOM.
"""

import asyncio
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from playwright.async_api import Page

from cep_query.models import FieldDescriptor, FieldKind
from config.banxico_selectors import CRITERIO_LABEL_SELECTOR, CRITERIO_LABELS, FORM_FIELD_IDS


# Orden visual / de tabulación del formulario
FILL_ORDER = ["fecha", "tipoCriterio", "criterio", "emisor", "receptor", "cuenta", "monto"]

FALSE_STRINGS = {"", "0", "false", "no", "off"}


RESOLVE_JS = """
(ids) => ids.filter(id => !document.getElementById(id))
"""

FILL_INPUT_JS = """
([id, value]) => {
    const element = document.getElementById(id);
    if (!element) return false;
    element.value = value;
    for (const type of ['input', 'change', 'keyup', 'blur']) {
        element.dispatchEvent(new Event(type, { bubbles: true }));
    }
    return true;
}
"""

FILL_SELECT_JS = """
([id, value]) => {
    const element = document.getElementById(id);
    if (!element) return 'element not found';
    const option = Array.from(element.options).find(o => o.value === value);
    if (!option) return 'option not found';
    element.value = value;
    for (const type of ['change', 'input', 'focus', 'blur']) {
        element.dispatchEvent(new Event(type, { bubbles: true }));
    }
    // Forzar redibujado
    element.style.display = 'none';
    element.offsetHeight;
    element.style.display = '';
    return null;
}
"""

FILL_CHECKBOX_JS = """
([id, checked]) => {
    const element = document.getElementById(id);
    if (!element) return false;
    element.checked = checked;
    element.dispatchEvent(new Event('change', { bubbles: true }));
    return true;
}
"""

UPDATE_LABEL_JS = """
([selector, text]) => {
    const label = document.querySelector(selector);
    if (!label) return false;
    label.textContent = text;
    return true;
}
"""

READ_VALUES_JS = """
(fields) => {
    const values = {};
    for (const [name, id] of Object.entries(fields)) {
        const element = document.getElementById(id);
        if (!element) {
            values[name] = 'FIELD_NOT_FOUND';
            continue;
        }
        if (element.type === 'checkbox') {
            values[name] = element.checked;
            continue;
        }
        values[name] = element.value;
        if (element.tagName === 'SELECT') {
            const selected = element.options[element.selectedIndex];
            values[name + '_text'] = selected ? selected.text : 'No selection';
        }
    }
    return values;
}
"""


def detect_fields() -> List[FieldDescriptor]:
    """Campos conocidos del formulario de Banxico."""
    ids = FORM_FIELD_IDS
    return [
        FieldDescriptor(
            name="fecha", locator=ids["fecha"], kind=FieldKind.DATE, required=True,
            description="Fecha en la que realizó el pago",
        ),
        FieldDescriptor(
            name="tipoCriterio", locator=ids["tipoCriterio"], kind=FieldKind.SELECT, required=True,
            options=dict(CRITERIO_LABELS), description="Criterio de búsqueda",
        ),
        FieldDescriptor(
            name="criterio", locator=ids["criterio"], kind=FieldKind.TEXT, required=True,
            max_length=7, description="Número de referencia o clave de rastreo",
        ),
        FieldDescriptor(
            name="emisor", locator=ids["emisor"], kind=FieldKind.SELECT, required=True,
            description="Institución emisora del pago",
        ),
        FieldDescriptor(
            name="receptor", locator=ids["receptor"], kind=FieldKind.SELECT, required=True,
            description="Institución receptora del pago",
        ),
        # Requerido solo para descargar el CEP, no para consultar el pago
        FieldDescriptor(
            name="cuenta", locator=ids["cuenta"], kind=FieldKind.TEXT, max_length=18,
            description="Cuenta Beneficiaria (CLABE, tarjeta de débito o número de celular)",
        ),
        FieldDescriptor(
            name="receptorParticipante", locator=ids["receptorParticipante"], kind=FieldKind.CHECKBOX,
            description="Pago a Banco",
        ),
        FieldDescriptor(
            name="monto", locator=ids["monto"], kind=FieldKind.TEXT, max_length=15,
            description="Monto del pago",
        ),
        FieldDescriptor(
            name="captcha", locator=ids["captcha"], kind=FieldKind.TEXT,
            description="Código de seguridad",
        ),
    ]


def build_field_table(fields: Iterable[FieldDescriptor]) -> Dict[str, FieldDescriptor]:
    """Indexa los campos por nombre lógico; los nombres deben ser únicos."""
    table: Dict[str, FieldDescriptor] = {}
    for field in fields:
        if field.name in table:
            raise ValueError(f"Campo duplicado en el formulario: {field.name}")
        table[field.name] = field
    return table


def to_checked(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in FALSE_STRINGS
    return bool(value)


class FormDriver:
    """Llena el formulario de consulta campo por campo."""

    def __init__(
        self,
        page: Page,
        fields: Optional[Iterable[FieldDescriptor]] = None,
        settle_delay: float = 2.5,
    ):
        """
        Inicializa el driver y construye la tabla de campos.

        Args:
            page: Página de Playwright con el formulario cargado
            fields: Campos del formulario (default: detect_fields())
            settle_delay: Segundos de espera después de cada campo
        """
        self.page = page
        self.fields = build_field_table(fields if fields is not None else detect_fields())
        self.settle_delay = settle_delay
        self.missing: Set[str] = set()
        self.failures: Dict[str, str] = {}
        self._resolved = False

    async def resolve(self) -> Set[str]:
        """
        Verifica una sola vez que cada campo exista en la página.

        Returns:
            Nombres lógicos de los campos que no se encontraron
        """
        by_locator = {field.locator: name for name, field in self.fields.items()}
        not_found = await self.page.evaluate(RESOLVE_JS, list(by_locator))
        self.missing = {by_locator[locator] for locator in not_found}
        self._resolved = True

        if self.missing:
            print(f"⚠️  Campos no encontrados en la página: {', '.join(sorted(self.missing))}")
        return self.missing

    def fill_sequence(self, data: Mapping[str, Any]) -> List[str]:
        """Campos a llenar, en orden: primero el orden del formulario, luego el resto."""
        ordered = [name for name in FILL_ORDER if name in data and name in self.fields]
        ordered += [name for name in self.fields if name in data and name not in ordered]
        return [name for name in ordered if data[name] is not None]

    async def fill_field(self, name: str, value: Any) -> bool:
        """
        Llena un campo con la estrategia de su tipo.

        Returns:
            True si el valor quedó aplicado; False si es una falla suave
            (campo u opción inexistente), registrada en ``failures``.
        """
        field = self.fields.get(name)
        if field is None:
            return False

        if name in self.missing:
            self.failures[name] = "element not found"
            print(f"  ❌ Campo no encontrado: {field.locator}")
            return False

        if field.kind == FieldKind.SELECT:
            error = await self.page.evaluate(FILL_SELECT_JS, [field.locator, str(value)])
            if error:
                self.failures[name] = error
                print(f"  ❌ {field.description}: {error} ({value})")
                return False
        elif field.kind == FieldKind.CHECKBOX:
            found = await self.page.evaluate(FILL_CHECKBOX_JS, [field.locator, to_checked(value)])
            if not found:
                self.failures[name] = "element not found"
                return False
        else:
            found = await self.page.evaluate(FILL_INPUT_JS, [field.locator, str(value)])
            if not found:
                self.failures[name] = "element not found"
                return False

        print(f"  ✓ {field.description}: {value}")
        return True

    async def update_criterio_label(self, tipo_criterio: str) -> bool:
        """Reescribe la etiqueta del campo criterio según el tipo elegido."""
        text = CRITERIO_LABELS.get(tipo_criterio)
        if text is None:
            return False
        return await self.page.evaluate(UPDATE_LABEL_JS, [CRITERIO_LABEL_SELECTOR, text])

    async def fill_form(self, data: Mapping[str, Any]) -> Dict[str, str]:
        """
        Llena los campos presentes en ``data``, uno a uno, con espera entre cada uno.

        Las llaves desconocidas se ignoran.

        Returns:
            Fallas suaves por campo
        """
        self.failures = {}
        if not self._resolved:
            await self.resolve()

        for name in self.fill_sequence(data):
            await self.fill_field(name, data[name])
            if self.settle_delay:
                await asyncio.sleep(self.settle_delay)

            # La página no siempre actualiza la etiqueta por sí sola
            if name == "tipoCriterio":
                await self.update_criterio_label(str(data[name]))

        return dict(self.failures)

    async def read_values(self) -> Dict[str, Any]:
        """Lee el valor actual de cada campo (y el texto de la opción en selects)."""
        fields = {name: field.locator for name, field in self.fields.items()}
        return await self.page.evaluate(READ_VALUES_JS, fields)
