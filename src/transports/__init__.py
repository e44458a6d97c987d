import pkgutil
import importlib
import transports.backends

# 自动导入 backends 目录下的所有后端
for _, modname, _ in pkgutil.iter_modules(transports.backends.__path__):
    importlib.import_module(f"transports.backends.{modname}")
