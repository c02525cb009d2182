from __future__ import annotations
from pathlib import Path
import argparse
import logging
from motion.config.settings import settings
from motion.pipeline.pipeline import run_recording


def pick(root: Path, pattern: str) -> str:
    matches = sorted(root.glob(pattern))
    if not matches:
        raise FileNotFoundError(pattern)
    return str(matches[0])


def main():
    ap = argparse.ArgumentParser(description="Replay a linear-acceleration CSV through the movement classifier.")
    ap.add_argument('--data', type=str, default=None, help="CSV recording (default: bundled sample)")
    ap.add_argument('--denoiser', choices=['quantile', 'mean'], default=None)
    ap.add_argument('--hold-ticks', type=int, default=None)
    ap.add_argument('--threshold', type=float, default=None, help="acceleration threshold, squared units")
    ap.add_argument('--sample-hz', type=float, default=None)
    ap.add_argument('--report-hz', type=float, default=None)
    ap.add_argument('--resample', action='store_true')
    ap.add_argument('--all', action='store_true', help="print every tick, not only report events")
    ap.add_argument('--trace', type=str, default=None, help="write the per-tick trace CSV here")
    args = ap.parse_args()

    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    path = args.data or pick(Path(__file__).resolve().parent / 'sample data', 'DEMO_*.csv')
    out = run_recording(path, options={
        'denoiser': args.denoiser,
        'hold_ticks': args.hold_ticks,
        'acceleration_threshold': args.threshold,
        'sample_hz': args.sample_hz,
        'report_hz': args.report_hz,
        'resample': args.resample,
    })

    if args.all:
        for i, c in enumerate(out['directions'], start=1):
            print(f"{i:06d} {c or '-'}")
    else:
        for ev in out['events']:
            print(f"{ev['tick'] % 100:02} {ev['direction']}")

    if args.trace:
        Path(args.trace).write_text(out['trace_csv'], encoding='utf-8')

    meta = out['meta']
    print(f"\nTicks: {meta['n_ticks']} (fs≈{meta['fs_hz']:.1f} Hz, stride {meta['report_stride']})")
    print('Labels:', ', '.join(f"{k}={v}" for k, v in out['summary'].items()))
    print('Report events:', len(out['events']))


if __name__ == '__main__':
    main()
