import time
from functools import wraps
from mockinterview.config.settings import logger

def async_timing(func):
    @wraps(func)
    async def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return await func(*args, **kwargs)
        finally:
            duration = time.perf_counter() - start
            logger.info(f".:.{func.__qualname__}.:. executed in {duration:.2f}s")
    return wrapper
