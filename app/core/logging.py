"""
日志配置
"""
import logging
import sys


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """
    配置根日志记录器，输出到标准输出

    重复调用不会叠加handler（测试中会多次创建应用）
    """
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if not any(h.get_name() == "blog_api_console" for h in logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler.set_name("blog_api_console")
        logger.addHandler(console_handler)

    # uvicorn自己的handler交给根日志记录器统一输出
    for log_name in ["uvicorn", "uvicorn.error"]:
        uvicorn_logger = logging.getLogger(log_name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True

    return logger
