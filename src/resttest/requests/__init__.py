from resttest.requests.driver import RequestsDriver

__all__ = ["RequestsDriver"]
