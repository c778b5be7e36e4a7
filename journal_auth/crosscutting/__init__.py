"""Crosscutting: config, logging, errores tipados, middleware, locks."""
