from .defaults import DEFAULT_PRESET_NAME, default_params, default_preset_record

__all__ = ["DEFAULT_PRESET_NAME", "default_params", "default_preset_record"]
