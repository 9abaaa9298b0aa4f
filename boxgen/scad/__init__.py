from .csg import Solid, to_scad
from .builder import Assembly, GenerationError, build_body, build_lid, build_assembly
from .compiler import assembly_sources, write_assembly, compile_assembly, compile_scad, check_scad
