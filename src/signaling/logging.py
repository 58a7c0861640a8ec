"""Logging configuration with optional CloudWatch support."""

import logging
import os

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def setup_logging(service_name: str = "signaling-server") -> None:
    """Configure the root logger for the signaling server.

    Args:
        service_name: Used as the CloudWatch log stream name.

    Environment variables:
        LOG_LEVEL: Level for the root and uvicorn loggers (default: "INFO")
        ACCESS_LOG: Set to "false" to silence uvicorn access lines
        ENABLE_CLOUDWATCH: Set to "true" to enable CloudWatch logging
        CLOUDWATCH_LOG_GROUP: Log group name (default: "webrtc-signaling")
    """
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    log_group = os.environ.get("CLOUDWATCH_LOG_GROUP", "webrtc-signaling")

    logger = logging.getLogger()
    logger.setLevel(level)
    logger.handlers.clear()

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(console)

    # uvicorn runs with log_config=None, so its loggers propagate to the root
    # handlers and follow the same level.
    for name in _SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True
        server_logger.setLevel(level)
    if os.environ.get("ACCESS_LOG", "").lower() == "false":
        logging.getLogger("uvicorn.access").disabled = True

    if os.environ.get("ENABLE_CLOUDWATCH", "").lower() == "true":
        try:
            import watchtower

            cw_handler = watchtower.CloudWatchLogHandler(
                log_group_name=log_group,
                log_stream_name=service_name,
                use_queues=True,
                create_log_group=True,
            )
            cw_handler.setFormatter(logging.Formatter(_FORMAT))
            logger.addHandler(cw_handler)
            logger.info(
                "CloudWatch logging enabled: group=%s, stream=%s",
                log_group,
                service_name,
            )
        except ImportError:
            logger.warning("watchtower not installed, CloudWatch logging disabled")
        except Exception as e:
            logger.warning("Failed to initialize CloudWatch logging: %s", e)
