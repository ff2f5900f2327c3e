import logging

from fastapi import FastAPI

from eventstream.operations.registry import OperationRegistry
from eventstream.operations.router import router as operations_router
from eventstream.settings import stream_settings

logging.getLogger("eventstream").setLevel(stream_settings.log_level.upper())

app = FastAPI()
app.state.operations = OperationRegistry()

app.include_router(operations_router)
