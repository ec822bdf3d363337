"""Helper modules for the print shop order desk."""

__all__ = [
    "form_input",
    "payment_gateway",
    "print_sink",
]
