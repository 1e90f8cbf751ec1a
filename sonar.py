#!/usr/bin/env python3
"""
Sonar - IPv4 Ping Sweep

Expands a CIDR block or a base/start/end range, sends one ICMP echo per
address with a bounded number of probes in flight, and reports the hosts
in address order.

Usage:
    python sonar.py --cidr 192.168.1.0/24
    python sonar.py --base 192.168.1 --start 1 --end 50 -c 1 --progress
    python sonar.py --cidr 10.0.0.0/22 --include-unreachable -o sweep.csv

Raw ICMP sockets may require root (or net.ipv4.ping_group_range on Linux).
"""

import sys

from sonar.main import main

if __name__ == "__main__":
    sys.exit(main())
