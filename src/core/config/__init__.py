"""
Configuration Module

Centralized, type-safe configuration for the screenshot gateway.

Components:
-----------
- **settings.py**: Pydantic-based configuration with environment variable loading
- **constants.py**: Parameter bounds, defaults, header names, stage identifiers

Usage:
------
```python
from src.core.config import get_settings
from src.core.config.constants import Stage, MAX_WIDTH

settings = get_settings()
secret = settings.security.SCREENSHOT_SECRET.get_secret_value()
```

Environment Variables:
---------------------
```bash
SCREENSHOT_SECRET=change-me
CF_ACCOUNT_ID=...
CF_API_TOKEN=...
CACHE_BACKEND=redis        # or "memory"
CACHE_KEY_NAMESPACE=example.com
REDIS_HOST=localhost
LOG_LEVEL=INFO
LOG_FORMAT=json
```
"""

from src.core.config.settings import Settings, get_settings, reload_settings

__all__ = ["Settings", "get_settings", "reload_settings"]
