"""
Response schema shared between request building and response decoding.

A ResponseSchema is declared once per use case. The same value renders the
`responseSchema` sent to the service and validates the decoded payload, so
the declared shape and the checked shape cannot drift apart.
"""

from typing import Any, Dict, Iterable, List

from jsonschema import Draft7Validator

from civiclens.services.gemini.errors import MalformedResponseError


class ResponseSchema:
    """
    Closed object schema: a fixed set of typed fields, a required subset and
    optional enum constraints.

    Field specs use JSON-schema vocabulary, e.g.
        {"type": "string", "enum": ["High", "Low"]}
    """

    def __init__(self, properties: Dict[str, Dict[str, Any]], required: Iterable[str]):
        required = list(required)
        unknown = [name for name in required if name not in properties]
        if unknown:
            raise ValueError(f"Required fields not declared: {unknown}")
        self.properties = properties
        self.required = required
        self._validator = Draft7Validator(self.json_schema())

    def json_schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": self.properties,
            "required": self.required,
            "additionalProperties": False,
        }

    def to_request(self) -> Dict[str, Any]:
        """Render in the service's OpenAPI-subset dialect (upper-case type names)."""
        properties = {}
        for name, spec in self.properties.items():
            rendered = {"type": spec["type"].upper()}
            if "enum" in spec:
                rendered["enum"] = list(spec["enum"])
            if "description" in spec:
                rendered["description"] = spec["description"]
            properties[name] = rendered
        return {
            "type": "OBJECT",
            "properties": properties,
            "required": list(self.required),
        }

    def validate(self, payload: Any) -> Dict[str, Any]:
        """
        Validate a decoded payload.

        Returns the payload unchanged; raises MalformedResponseError listing
        every violation otherwise.
        """
        errors: List[str] = []
        for error in sorted(self._validator.iter_errors(payload), key=lambda e: [str(p) for p in e.path]):
            location = ".".join(str(p) for p in error.path) or "<root>"
            errors.append(f"{location}: {error.message}")
        if errors:
            raise MalformedResponseError("Response does not match schema: " + "; ".join(errors))
        return payload
