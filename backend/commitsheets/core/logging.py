import structlog
import logging
import sys
import time

def setup_logging(debug: bool = False)-> None:
    """structured logging for the sync service"""
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    #renderer
    if debug:
        processors.append(structlog.dev.ConsoleRenderer())

    else:
        processors.append(structlog.processors.JSONRenderer())

    #configure structlog
    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    #configure standard logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.DEBUG if debug else logging.INFO,
    )
    #basicConfig is a no-op once handlers exist
    logging.getLogger().setLevel(logging.DEBUG if debug else logging.INFO)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("googleapiclient").setLevel(logging.WARNING)

def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)

class LoggingMiddleware:
    """logs each http request with its status and how long the handler took"""

    def __init__(self, app):
        self.app = app
        self.logger = get_logger("api")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = time.perf_counter()
        status = {"code": 500}

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                status["code"] = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            self.logger.info(
                "request completed",
                method=scope["method"],
                path=scope["path"],
                status_code=status["code"],
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
                client=(scope.get("client") or ["unknown", 0])[0],
            )
