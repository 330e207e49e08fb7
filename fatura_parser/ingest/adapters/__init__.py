"""Per-format adapters mapping statement text to :class:`~fatura_parser.models.Statement`."""
