"""
Tests del llenado secuencial del formulario (FormDriver) sobre la réplica de Banxico.
"""

from types import SimpleNamespace

import pytest

from cep_query import form_driver
from cep_query.form_driver import FILL_ORDER, FormDriver, build_field_table, detect_fields, to_checked
from cep_query.models import FieldDescriptor, FieldKind
from tests.conftest import VALID_FORM_DATA, load_form


class TestFieldTable:
    """Tabla de campos del formulario"""

    def test_detect_fields_known_locators(self):
        table = build_field_table(detect_fields())

        assert table["fecha"].locator == "input_fecha"
        assert table["receptorParticipante"].locator == "input_benef_es_part"
        assert table["receptorParticipante"].kind == FieldKind.CHECKBOX
        assert table["criterio"].max_length == 7
        assert table["cuenta"].max_length == 18
        assert table["cuenta"].required is False
        assert table["tipoCriterio"].options == {"T": "Clave de rastreo", "R": "Número de referencia"}

    def test_duplicate_names_rejected(self):
        fields = [
            FieldDescriptor(name="fecha", locator="a", kind=FieldKind.DATE),
            FieldDescriptor(name="fecha", locator="b", kind=FieldKind.TEXT),
        ]
        with pytest.raises(ValueError):
            build_field_table(fields)

    def test_to_checked(self):
        assert to_checked(True) is True
        assert to_checked("true") is True
        assert to_checked("false") is False
        assert to_checked("0") is False
        assert to_checked(None) is False


class TestFillSequence:
    """Orden de llenado"""

    def test_follows_form_order_and_skips_unknown(self):
        driver = FormDriver(page=None)
        data = dict(VALID_FORM_DATA, receptorParticipante=True, desconocido="x")
        sequence = driver.fill_sequence(data)

        assert sequence[:len(FILL_ORDER)] == FILL_ORDER
        assert sequence[-1] == "receptorParticipante"
        assert "desconocido" not in sequence

    def test_none_values_are_skipped(self):
        driver = FormDriver(page=None)
        assert driver.fill_sequence({"fecha": "03-08-2025", "monto": None}) == ["fecha"]


class RecordingPage:
    """Página falsa que anota cada operación en la bitácora compartida."""

    def __init__(self, log):
        self.log = log

    async def evaluate(self, script, arg=None):
        if script == form_driver.RESOLVE_JS:
            return []
        if script == form_driver.UPDATE_LABEL_JS:
            self.log.append(("label", arg[1]))
            return True
        self.log.append(("fill", arg[0]))
        # FILL_SELECT_JS devuelve null cuando la opción quedó aplicada
        return None if script == form_driver.FILL_SELECT_JS else True


class TestSettleDelay:
    """Espera entre campos"""

    async def test_one_delay_per_field_and_label_after_tipo(self, monkeypatch):
        log = []

        async def fake_sleep(seconds):
            log.append(("sleep", seconds))

        monkeypatch.setattr(form_driver, "asyncio", SimpleNamespace(sleep=fake_sleep))
        driver = FormDriver(RecordingPage(log), settle_delay=2.5)

        failures = await driver.fill_form(VALID_FORM_DATA)

        assert failures == {}
        assert log.count(("sleep", 2.5)) == len(VALID_FORM_DATA)
        assert log[:6] == [
            ("fill", "input_fecha"),
            ("sleep", 2.5),
            ("fill", "input_tipoCriterio"),
            ("sleep", 2.5),
            ("label", "Número de referencia"),
            ("fill", "input_criterio"),
        ]
        # Cada campo va seguido de su espera
        fills = [i for i, entry in enumerate(log) if entry[0] == "fill"]
        assert all(log[i + 1] == ("sleep", 2.5) for i in fills)

    async def test_no_delay_when_disabled(self, monkeypatch):
        log = []

        async def fake_sleep(seconds):
            log.append(("sleep", seconds))

        monkeypatch.setattr(form_driver, "asyncio", SimpleNamespace(sleep=fake_sleep))
        await FormDriver(RecordingPage(log), settle_delay=0).fill_form({"fecha": "03-08-2025"})

        assert log == [("fill", "input_fecha")]


class TestFormDriver:
    """Llenado sobre una página real"""

    async def test_resolve_reports_missing_fields(self, page):
        await load_form(page)
        driver = FormDriver(page, settle_delay=0)

        missing = await driver.resolve()

        # La réplica no trae captcha
        assert missing == {"captcha"}

    async def test_fill_form_reads_back_values(self, page):
        await load_form(page)
        driver = FormDriver(page, settle_delay=0)

        failures = await driver.fill_form(dict(VALID_FORM_DATA, desconocido="ignorado"))
        values = await driver.read_values()

        assert failures == {}
        assert values["fecha"] == "03-08-2025"
        assert values["criterio"] == "1234567"
        assert values["emisor"] == "40002"
        assert values["emisor_text"] == "BANAMEX"
        assert values["receptor_text"] == "SANTANDER"
        assert values["cuenta"] == "123456789012345678"
        assert values["monto"] == "1500.00"
        assert values["receptorParticipante"] is False
        assert values["captcha"] == "FIELD_NOT_FOUND"
        assert "desconocido" not in values

    async def test_input_fires_page_events(self, page):
        await load_form(page)
        driver = FormDriver(page, settle_delay=0)

        await driver.fill_form({"fecha": "03-08-2025"})
        events = await page.evaluate("() => window.__events")

        assert events == ["input", "change", "keyup", "blur"]

    async def test_criterio_label_follows_tipo(self, page):
        await load_form(page)
        driver = FormDriver(page, settle_delay=0)

        await driver.fill_form({"tipoCriterio": "T"})
        label = await page.evaluate("() => document.querySelector('label[for=\"input_criterio\"]').textContent")
        assert label == "Clave de rastreo"

        await driver.fill_form({"tipoCriterio": "R"})
        label = await page.evaluate("() => document.querySelector('label[for=\"input_criterio\"]').textContent")
        assert label == "Número de referencia"

    async def test_unknown_option_is_soft_failure(self, page):
        await load_form(page)
        driver = FormDriver(page, settle_delay=0)

        failures = await driver.fill_form(dict(VALID_FORM_DATA, emisor="99999"))
        values = await driver.read_values()

        assert failures == {"emisor": "option not found"}
        # El resto del formulario se llena igual
        assert values["emisor"] == ""
        assert values["receptor"] == "40014"
        assert values["monto"] == "1500.00"

    async def test_missing_field_is_soft_failure(self, page):
        await load_form(page)
        driver = FormDriver(page, settle_delay=0)

        failures = await driver.fill_form({"captcha": "ABCD", "monto": "10"})

        assert failures == {"captcha": "element not found"}
        assert (await driver.read_values())["monto"] == "10"

    async def test_checkbox_strategy(self, page):
        await load_form(page)
        driver = FormDriver(page, settle_delay=0)

        await driver.fill_form({"receptorParticipante": True})
        assert (await driver.read_values())["receptorParticipante"] is True

        await driver.fill_form({"receptorParticipante": "false"})
        assert (await driver.read_values())["receptorParticipante"] is False

    async def test_failures_reset_between_fills(self, page):
        await load_form(page)
        driver = FormDriver(page, settle_delay=0)

        assert await driver.fill_form({"emisor": "99999"}) == {"emisor": "option not found"}
        assert await driver.fill_form({"emisor": "40012"}) == {}
        assert driver.failures == {}
