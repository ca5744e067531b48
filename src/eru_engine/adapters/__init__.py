"""Host adapters that drive the buffer engine from a UI toolkit."""
