"""
Services layer - analysis, search, assistant and geocoding orchestration.

DESIGN PRINCIPLE:
- Services contain business logic, NOT routes
- Every AI flow resolves to a renderable value (result or fallback)
- The model client is passed in explicitly, never reached for globally
"""
