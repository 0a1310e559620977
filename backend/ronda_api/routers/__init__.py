"""
HTTP routers. Thin: validate the body, call one service operation, wrap the Result.
"""
