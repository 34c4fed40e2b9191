"""HTTP client with request metrics and a named pool of clients."""