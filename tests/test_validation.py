"""
Tests de la validación previa al lanzamiento del navegador.
"""

from datetime import date, datetime

import pytest

from cep_query.exceptions import FormDataError
from cep_query.validation import format_date, sanitize_log_data, validate_form_data
from tests.conftest import VALID_FORM_DATA


class TestValidateFormData:
    """Reglas de los datos del formulario"""

    def test_valid_data_normalizes_date(self):
        data = validate_form_data(dict(VALID_FORM_DATA, fecha="03/08/2025"))

        assert data["fecha"] == "03-08-2025"
        assert data["criterio"] == "1234567"

    def test_input_is_not_mutated(self):
        original = dict(VALID_FORM_DATA, fecha="03/08/2025")
        validate_form_data(original)

        assert original["fecha"] == "03/08/2025"

    @pytest.mark.parametrize("field", ["fecha", "tipoCriterio", "criterio", "emisor", "receptor", "cuenta", "monto"])
    def test_required_fields(self, field):
        data = dict(VALID_FORM_DATA)
        del data[field]

        with pytest.raises(FormDataError, match=f"Required field missing: {field}"):
            validate_form_data(data)

    def test_empty_value_counts_as_missing(self):
        with pytest.raises(FormDataError, match="Required field missing: monto"):
            validate_form_data(dict(VALID_FORM_DATA, monto=""))

    def test_invalid_tipo_criterio(self):
        with pytest.raises(FormDataError, match="Invalid tipoCriterio"):
            validate_form_data(dict(VALID_FORM_DATA, tipoCriterio="X"))

    def test_reference_number_limit(self):
        with pytest.raises(FormDataError, match="Reference number cannot exceed 7 characters"):
            validate_form_data(dict(VALID_FORM_DATA, criterio="12345678"))

    def test_tracking_key_limit(self):
        validate_form_data(dict(VALID_FORM_DATA, tipoCriterio="T", criterio="A" * 30))

        with pytest.raises(FormDataError, match="Tracking key cannot exceed 30 characters"):
            validate_form_data(dict(VALID_FORM_DATA, tipoCriterio="T", criterio="A" * 31))

    @pytest.mark.parametrize("fecha", ["2025-08-03", "3/8/2025", "03.08.2025"])
    def test_invalid_date(self, fecha):
        with pytest.raises(FormDataError, match="Invalid date format"):
            validate_form_data(dict(VALID_FORM_DATA, fecha=fecha))

    def test_clabe_checked_only_at_18_chars(self):
        with pytest.raises(FormDataError, match="Invalid CLABE format"):
            validate_form_data(dict(VALID_FORM_DATA, cuenta="12345678901234567X"))

        # Tarjeta de débito o celular: otras longitudes pasan
        assert validate_form_data(dict(VALID_FORM_DATA, cuenta="5512345678"))["cuenta"] == "5512345678"

    def test_amount_allows_thousands_separator(self):
        assert validate_form_data(dict(VALID_FORM_DATA, monto="1,500.00"))["monto"] == "1,500.00"

    def test_invalid_amount(self):
        with pytest.raises(FormDataError, match="Invalid amount format"):
            validate_form_data(dict(VALID_FORM_DATA, monto="mil pesos"))

    def test_bank_codes_must_be_numeric(self):
        with pytest.raises(FormDataError, match="Invalid bank codes"):
            validate_form_data(dict(VALID_FORM_DATA, emisor="BANAMEX"))

    def test_numeric_bank_codes_as_int(self):
        data = validate_form_data(dict(VALID_FORM_DATA, emisor=40002, receptor=40014))
        assert data["emisor"] == 40002


class TestSanitizeLogData:
    """Enmascarado para los logs"""

    def test_masks_cuenta_and_criterio(self):
        sanitized = sanitize_log_data(VALID_FORM_DATA)

        assert sanitized["cuenta"] == "***5678"
        assert sanitized["criterio"] == "***567"
        assert sanitized["monto"] == "1500.00"

    def test_absent_fields_untouched(self):
        assert sanitize_log_data({"fecha": "03-08-2025"}) == {"fecha": "03-08-2025"}


class TestFormatDate:
    """Formato de fecha del formulario"""

    def test_date_objects(self):
        assert format_date(date(2025, 8, 3)) == "03-08-2025"
        assert format_date(datetime(2025, 8, 3, 14, 30)) == "03-08-2025"

    def test_iso_string(self):
        assert format_date("2025-08-03") == "03-08-2025"

    def test_slash_string(self):
        assert format_date("03/08/2025") == "03-08-2025"

    def test_other_strings_unchanged(self):
        assert format_date("ayer") == "ayer"
        assert format_date("2025-13-45") == "2025-13-45"
