"""HTTP blueprints. Each subpackage exports one Blueprint registered in create_app()."""
