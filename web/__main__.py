"""
Web 진입점

실행 방법:
    python -m web
"""

import uvicorn

from core.config.loader import SettingsLoadError, get_settings
from core.constants import Defaults

if __name__ == "__main__":
    try:
        web_config = get_settings().web
        host, port = web_config.host, web_config.port
    except SettingsLoadError:
        host, port = Defaults.WEB_HOST, Defaults.WEB_PORT

    uvicorn.run(
        "web.app:app",
        host=host,
        port=port,
        reload=False,
    )
