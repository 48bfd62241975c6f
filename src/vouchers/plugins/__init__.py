"""Plugin system — pluggy hookspecs and code generator registry."""

import pluggy

hookimpl = pluggy.HookimplMarker("vouchers")
