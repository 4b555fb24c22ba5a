# =============================================================================
# lightshow – Demo entry point: discover a fixture and fade its channels
# -----------------------------------------------------------------------------
# Copyright (c) Alejandro Fernández Rodríguez
#
# This source code is released under the GEL 3.0 License.
#
# DISCLAIMER:
# This program is provided "AS IS", without warranty of any kind, express or
# implied, including but not limited to the warranties of merchantability,
# fitness for a particular purpose, and non-infringement. In no event shall the
# authors be liable for any claim, damages, or other liability arising from,
# out of, or in connection with the use of this software.
#
# LICENSE – GEL 3.0:
# You may use, copy, modify, and distribute this code according to the terms of
# the GEL 3.0 License. A full copy of the license text must accompany any
# redistribution. If the license text is missing, see: https://gel-license.org
# @author
#    Alejandro Fernández Rodríguez — github.com/afernandezLuc
#  @version 1.0.0
#  @date 2026-01-07
# =============================================================================

from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import List, Optional, Sequence

from heliosctl import HeliosDevice, HeliosError
from heliosctl.config import HTTP_TIMEOUT_S, SCAN_WINDOW_S
from helio_scanner import scan_udp

_LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_DEVICE = 1
EXIT_ERROR = 2

LIGHTSHOW_STEPS = 50
LIGHTSHOW_STEP_SIZE = 2
LIGHTSHOW_DELAY_S = 0.03


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="helios-lightshow",
        description="Discover Heliospectra fixtures and run a channel fade demo.",
    )
    parser.add_argument(
        "--timeout", type=float, default=SCAN_WINDOW_S,
        help="discovery window in seconds (max %(default)s)",
    )
    parser.add_argument(
        "--address",
        help="skip discovery and drive the fixture at this IP address",
    )
    parser.add_argument(
        "--http-timeout", type=float, default=HTTP_TIMEOUT_S,
        help="timeout of each HTTP request in seconds",
    )
    parser.add_argument("--steps", type=int, default=LIGHTSHOW_STEPS)
    parser.add_argument("--step-size", type=int, default=LIGHTSHOW_STEP_SIZE)
    parser.add_argument("--delay", type=float, default=LIGHTSHOW_DELAY_S,
                        help="pause between intensity updates in seconds")
    parser.add_argument("--scan-only", action="store_true",
                        help="list discovered fixtures and exit")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def fade_channel(
    device: HeliosDevice,
    intensities: List[int],
    idx: int,
    steps: int = LIGHTSHOW_STEPS,
    step_size: int = LIGHTSHOW_STEP_SIZE,
    delay_s: float = LIGHTSHOW_DELAY_S,
) -> None:
    """
    Ramp channel `idx` up to steps*step_size, back down to 0, then turn every
    channel off. `intensities` is reused as the working buffer.
    """
    device.set_intensities(*intensities)

    for i in range(1, steps):
        time.sleep(delay_s)
        intensities[idx] = step_size * i
        device.set_intensities(*intensities)

    for i in range(steps, -1, -1):
        time.sleep(delay_s)
        intensities[idx] = step_size * i
        device.set_intensities(*intensities)

    for i in range(len(intensities)):
        intensities[i] = 0
    device.set_intensities(*intensities)


def run_lightshow(device: HeliosDevice, steps: int, step_size: int, delay_s: float) -> None:
    diag = device.get_diagnostic()
    print(f"Fixture {diag.model} (cpu fw {diag.cpu_fw}), {diag.channel_count} channels:")
    for wl in diag.wavelengths:
        print(f"  channel {wl.number}: {wl.wavelength} @ {wl.power}")

    intensities = [0] * diag.channel_count
    for idx in range(diag.channel_count):
        fade_channel(device, intensities, idx, steps, step_size, delay_s)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Application bootstrap function.

    Returns:
        Process exit code: 0 on success, 1 if no fixture answered the scan,
        2 on any library error.
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.address:
            device = HeliosDevice(args.address, timeout_s=args.http_timeout)
        else:
            devices = scan_udp(args.timeout)
            print("Got devices from scan:")
            for info in devices:
                print(f"  {info}")
            if not devices:
                return EXIT_NO_DEVICE
            if args.scan_only:
                return EXIT_OK
            device = HeliosDevice.from_device_info(devices[0], timeout_s=args.http_timeout)

        run_lightshow(device, args.steps, args.step_size, args.delay)

    except (HeliosError, ValueError) as exc:
        _LOGGER.error("Lightshow failed: %s", exc)
        return EXIT_ERROR

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
