"""
FastAPI routers.

Only operational endpoints live here; the data layer itself is used as a
library by the application.
"""
