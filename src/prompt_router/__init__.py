"""
Prompt router: classify a free-text prompt and dispatch it to an AI provider.

Transforms a prompt into a uniform result containing:
- Routing decision (category, confidence, reason) or a forced target
- Provider text output
- Normalized token usage and provider metadata

Architecture: rule-based classifier + per-provider handlers behind one Dispatcher,
served by FastAPI.
"""

__version__ = "0.1.0"
