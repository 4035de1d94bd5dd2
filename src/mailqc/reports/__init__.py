"""Performance aggregation and reports."""
