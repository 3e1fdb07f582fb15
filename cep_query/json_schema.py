"""JSON Schema del envelope que emite el script de consulta."""

TABLE_RESULT_SCHEMA = {
    "type": "object",
    "required": ["type", "headers", "rows"],
    "properties": {
        "type": {"const": "table"},
        "headers": {"type": "array", "items": {"type": "string"}},
        "rows": {
            "type": "array",
            "items": {"type": "array", "items": {"type": "string"}}
        }
    }
}

TEXT_RESULT_SCHEMA = {
    "type": "object",
    "required": ["type", "content", "html"],
    "properties": {
        "type": {"const": "text"},
        "content": {"type": "string"},
        "html": {"type": "string"}
    }
}

ERROR_RESULT_SCHEMA = {
    "type": "object",
    "required": ["type", "content", "html"],
    "properties": {
        "type": {"const": "error"},
        "content": {"type": "string"},
        "html": {"type": "string"},
        "display": {"type": "string"}
    }
}

# Catálogo de bancos: código → nombre
BANK_OPTIONS_SCHEMA = {
    "type": "object",
    "not": {"required": ["type"]},
    "additionalProperties": {"type": "string"}
}

ENVELOPE_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "Envelope de ejecución (consulta CEP)",
    "type": "object",
    "required": ["success"],
    "properties": {
        "success": {"type": "boolean"},
        "data": {
            "oneOf": [
                {"type": "null"},
                TABLE_RESULT_SCHEMA,
                TEXT_RESULT_SCHEMA,
                ERROR_RESULT_SCHEMA,
                BANK_OPTIONS_SCHEMA
            ]
        },
        "error": {"type": "string"}
    }
}
