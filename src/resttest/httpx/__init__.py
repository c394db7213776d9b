from resttest.httpx.driver import AsyncHttpxDriver, HttpxDriver

__all__ = ["HttpxDriver", "AsyncHttpxDriver"]
