"""HTTP primitives: headers, the request facade and responses."""
