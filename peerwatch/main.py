from __future__ import annotations
import argparse
import logging
import threading

from .collectors import collector_loop
from .config import COLLECTORS, ConfigError, init_cfg_from_args
from .models import SortColumn
from .registry import ConnectionRegistry
from .table import PeerTableModel, RefreshScheduler
from .web import create_app

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description='Live table of the peers this host is connected to')
    ap.add_argument('--port', type=int, default=None, help='HTTP port (default 8765)')
    ap.add_argument('--host', type=str, default=None, help='bind address (default 0.0.0.0)')
    ap.add_argument('--interval', type=float, default=None, help='refresh interval in seconds (default 1.0)')
    ap.add_argument('--collector', choices=COLLECTORS, default=None,
                    help="connection source: 'ss' on Linux, psutil elsewhere (default auto)")
    ap.add_argument('--udp', action='store_true', help='include UDP sockets with a remote address')
    ap.add_argument('--sort', type=str, default=None,
                    help='initial sort column: ' + ', '.join(c.name.lower() for c in SortColumn))
    ap.add_argument('--desc', action='store_true', help='sort descending')
    ap.add_argument('--config', type=str, default=None, help='YAML or JSON settings file')
    ap.add_argument('--log-level', type=str, default='INFO')
    return ap

def main(argv=None):
    ap = build_parser()
    args = ap.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(),
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    try:
        cfg = init_cfg_from_args(args)
    except (ConfigError, ValueError) as exc:
        ap.error(str(exc))
    if cfg.config_path:
        print(f"[*] config: {cfg.config_path}")

    registry = ConnectionRegistry()
    stop = threading.Event()
    t = threading.Thread(target=collector_loop, args=(cfg, registry, cfg.interval, stop),
                         name='peer-collector', daemon=True)
    t.start()

    model = PeerTableModel(registry)
    if cfg.sort_column != SortColumn.NONE:
        model.sort(cfg.sort_column, cfg.sort_order)
    scheduler = RefreshScheduler(model, cfg.interval)
    scheduler.start()

    app = create_app(cfg, model)
    print(f"[*] Serving on http://localhost:{cfg.port}")
    try:
        app.run(host=cfg.host, port=cfg.port, debug=False, use_reloader=False)
    finally:
        scheduler.stop()
        stop.set()

if __name__ == '__main__':
    main()
