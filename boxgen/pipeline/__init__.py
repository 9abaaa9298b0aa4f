"""Pipeline stages — params, layout, validation.

Every regeneration cycle runs the stages in order on one immutable
``ParameterSet`` snapshot:

  params      — parse the flat key/value input into a ParameterSet
  layout      — derive post placement, vent slots, wire cutouts, trims
  validation  — gate: hard errors block geometry, warnings do not

Geometry construction (``boxgen.scad``) only runs on a valid snapshot.
"""
