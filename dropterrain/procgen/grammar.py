"""
Module registry and parameter specification for terrain generation.

This module defines:
- InvalidConfiguration: Raised for parameter sets the generators cannot run with
- ParameterSpec: Defaults, ranges and validation of module parameters
- ModuleRegistry: Registration and lookup of terrain modules
"""

from typing import Dict, Any, Callable, Tuple, Optional, List


class InvalidConfiguration(ValueError):
    """Raised when a parameter set would make a generator divide by zero."""


class ParameterSpec:
    """
    Specification for module parameters with defaults and range metadata.

    Each parameter has:
    - min_val: Minimum recommended value (None = unbounded)
    - max_val: Maximum recommended value (None = unbounded)
    - default: Default value if not specified
    """

    def __init__(self, params: Dict[str, Tuple[Optional[float], Optional[float], Any]]):
        """
        Initialize parameter specification.

        Args:
            params: Dict mapping param_name -> (min_val, max_val, default)
        """
        self.params = params

    def validate(self, values: Dict[str, Any]) -> List[str]:
        """Return a message for every known parameter outside its range."""

        errors = []
        for param_name, (min_val, max_val, _) in self.params.items():
            value = values.get(param_name)
            if value is None or isinstance(value, str):
                continue

            if min_val is not None and value < min_val:
                errors.append(f"{param_name}={value} is below minimum {min_val}")
            if max_val is not None and value > max_val:
                errors.append(f"{param_name}={value} is above maximum {max_val}")

        return errors

    def extract_params(self, values: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Extract parameters for this module, filling in defaults."""

        values = values or {}
        result = {}
        for param_name, (_, _, default) in self.params.items():
            result[param_name] = values.get(param_name, default)

        return result

    def get_defaults(self) -> Dict[str, Any]:
        """Get default value of every parameter."""
        return {name: default for name, (_, _, default) in self.params.items()}

    def get_param_names(self) -> List[str]:
        """Get list of parameter names."""
        return list(self.params.keys())

    def get_param_ranges(self) -> Dict[str, Tuple[Optional[float], Optional[float]]]:
        """Get parameter ranges (min, max) for each parameter."""
        return {name: (min_val, max_val) for name, (min_val, max_val, _) in self.params.items()}


# Defaults match the original control panel
PLANE_SPEC = ParameterSpec({
    "width": (0.0, None, 100.0),
    "height": (0.0, None, 100.0),
    "width_segments": (1, None, 100),
    "height_segments": (1, None, 100),
})

FBM_SPEC = ParameterSpec({
    "octaves": (1, None, 8),
    "amplitude": (None, None, 15.0),
    "lacunarity": (None, None, 2.0),
    "gain": (None, None, 0.5),
    "scale": (0.0, None, 100.0),
    "max_height": (None, None, 10.0),
    "seed": (None, None, "seed"),
})

EROSION_SPEC = ParameterSpec({
    "drop_count": (0, None, 1),
    "seed": (None, None, "seed"),
    "capacity": (0.0, None, 30.0),
    "erosion_rate": (None, None, 1.0),
    "deposition_rate": (None, None, 1.0),
    "evaporation_rate": (0.0, 1.0, 0.1),
    "max_steps": (1, None, None),
})


class ModuleRegistry:
    """
    Registry for terrain generation modules.

    Manages module registration, lookup, and parameter specifications.
    """

    def __init__(self):
        self.modules: Dict[str, Callable] = {}
        self.param_specs: Dict[str, ParameterSpec] = {}
        self.name_to_id: Dict[str, int] = {}
        self.id_to_name: Dict[int, str] = {}
        self._next_id = 0

    def register(self, name: str, func: Callable, param_spec: ParameterSpec):
        """Register a new terrain module."""

        module_id = self._next_id
        self._next_id += 1

        self.modules[name] = func
        self.param_specs[name] = param_spec
        self.name_to_id[name] = module_id
        self.id_to_name[module_id] = name

    def get_module_function(self, name: str) -> Callable:
        """Get module function by name."""
        return self.modules[name]

    def get_module_name(self, module_id: int) -> str:
        """Get module name by ID."""
        return self.id_to_name[module_id]

    def get_module_id(self, name: str) -> int:
        """Get module ID by name."""
        return self.name_to_id[name]

    def get_parameter_spec(self, name: str) -> ParameterSpec:
        """Get parameter specification by module name."""
        return self.param_specs[name]

    def list_modules(self) -> List[Tuple[int, str]]:
        """List all registered modules as (id, name) pairs."""
        return [(module_id, name) for name, module_id in self.name_to_id.items()]
