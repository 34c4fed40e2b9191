"""Error codes, the standard error response, response helpers and the exception registry."""