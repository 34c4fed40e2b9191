"""Reusable buffer, byte-slice and object pools with usage metrics."""