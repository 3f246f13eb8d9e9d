"""Built-in traits. Each module exposes a `TRAIT` reference collected by `registry`."""
