# hrms/asgi.py - ASGI entry point: uvicorn hrms.asgi:app
from hrms.main import create_app

app = create_app()
