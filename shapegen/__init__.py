import importlib

mod = "shapegen"
class LazyLoader:
    """
    Lazy loader for the shapegen functions to speed up startup time.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item.startswith('__'):
            raise AttributeError(item)
        if item in self._mappings:
            module_name, func_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, func_name)
        else:
            return self._load_module(f"{mod}.{item}")

# Define the functions and their corresponding module paths
_mappings = {
    "value_to_shape": (f"{mod}.shape_inference", "value_to_shape"),
    "infer_shape": (f"{mod}.shape_inference", "infer_shape"),
    "infer_shape_parallel": (f"{mod}.shape_inference", "infer_shape_parallel"),
    "unify": (f"{mod}.unification", "unify"),
    "infer_shape_from_files": (f"{mod}.jsonltoshape", "infer_shape_from_files"),
    "convert_jsonl_to_shape": (f"{mod}.jsonltoshape", "convert_jsonl_to_shape"),
    "convert_shape_to_json_schema": (f"{mod}.shapetojsons", "convert_shape_to_json_schema"),
    "convert_shape_to_typescript": (f"{mod}.shapetots", "convert_shape_to_typescript"),
    "convert_jsonl_to_typescript": (f"{mod}.shapetots", "convert_jsonl_to_typescript"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
