"""
Unit tests for the prompt router.

Test individual components in isolation:
- Classifier scoring, tie-break and fallback rules
- Prompt guard (length limit, harmful patterns)
- Provider handlers (request translation, response and error parsing)
- Dispatcher (overrides, failure normalization, health probes)
- Settings parsing and startup validation
- API models and routes (dispatcher mocked)
"""
