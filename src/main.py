from collections.abc import Awaitable, Callable
import contextlib
import signal
import sys
import threading
import time
from types import FrameType

import uvicorn
from dotenv import load_dotenv

load_dotenv()  # import required here to support SETTINGS_FILENAME

from fastapi import FastAPI, Response
from kink import di
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from informarr.program import Program, StartupError
from informarr.utils import get_version
from informarr.utils.cli import handle_args
from routers import app_router


class LoguruMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        start_time = time.time()
        response = None

        try:
            response = await call_next(request)

            return response
        except Exception as e:
            logger.exception(f"Exception during request processing: {e}")
            raise
        finally:
            process_time = time.time() - start_time

            logger.log(
                "API",
                f"{request.method} {request.url.path} - {response.status_code if response else '500'} - {process_time:.2f}s",
            )


class Server(uvicorn.Server):
    def install_signal_handlers(self):
        pass

    @contextlib.contextmanager
    def run_in_thread(self):
        thread = threading.Thread(target=self.run, name="Server", daemon=True)
        thread.start()

        try:
            while not self.started:
                time.sleep(1e-3)
            yield
        finally:
            self.should_exit = True
            thread.join(timeout=5)


args = handle_args()

app = FastAPI(
    title="Informarr",
    summary="Notifies requesters when their media becomes available.",
    version=get_version(),
    redoc_url=None,
)

di[Program] = Program()

app.add_middleware(LoguruMiddleware)
app.include_router(app_router)

shutdown = threading.Event()


def signal_handler(signum: int, frame: FrameType | None):
    logger.log("PROGRAM", "Exiting Gracefully.")
    di[Program].stop()
    shutdown.set()


signal.signal(signal.SIGINT, signal_handler)
signal.signal(signal.SIGTERM, signal_handler)

config = uvicorn.Config(app, host=args.host, port=args.port, log_config=None)
server = Server(config=config)

with server.run_in_thread():
    try:
        di[Program].start()
    except StartupError as e:
        logger.critical(f"Startup failed: {e}")
        sys.exit(1)

    while not shutdown.is_set() and di[Program].is_alive():
        shutdown.wait(1)

    di[Program].stop()
    di[Program].join(timeout=10)

logger.critical("Server has been stopped")
sys.exit(0)
