from .loop import collect_once, collector_loop
