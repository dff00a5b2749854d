import os
import config

_tick_id = None


def set_tick(tick_id):
    global _tick_id
    _tick_id = tick_id


def log(scope, msg, level="INFO"):
    if scope == "WORLDGEN" and level == "INFO" and not getattr(config, "LOG_GENERATION", True):
        return
    if scope == "SIM" and level == "INFO" and not getattr(config, "LOG_SIMULATION", False):
        return
    if scope == "MESH" and level == "INFO" and not getattr(config, "MESH_LOG", False):
        return
    pid = os.getpid()
    tick = _tick_id
    tick_tag = f" t{tick}" if tick is not None else ""
    text = f"[{level}{tick_tag} pid{pid} {scope}] {msg}"
    use_color = getattr(config, "LOG_COLOR", True) and os.getenv("NO_COLOR") is None
    if use_color:
        if level == "ERROR":
            text = f"\x1b[31m{text}\x1b[0m"
        elif level == "WARN":
            text = f"\x1b[33m{text}\x1b[0m"
    print(text)
