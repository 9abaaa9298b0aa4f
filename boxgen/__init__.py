"""boxgen — parametric 3D-printable enclosure generator (body + lid)."""

__version__ = "0.3.0"
