"""
Expose the FastAPI application factory.

Run the facade with Uvicorn's factory mode:

```sh
uvicorn --factory codesession.api:create_app
```
"""

from .main import create_app

__all__ = ["create_app"]
