# remoteplayer

Read a game controller on one machine and stream its state over UDP to
another. The client folds joystick events (buttons, sticks, triggers, d-pad)
into a compact 12-byte controller state and sends it after every event. The
server listens on a port, creates one emulated Xbox 360 controller for every
client endpoint it hears from, and feeds each of them the states it receives.

## Installation

```
pip install .
```

For the test suite:

```
pip install .[test]
pytest
```

## Commands

Start the server, giving the UDP port to listen on (0–65535; it binds to all
interfaces):

```
remoteplayer-server 5000
```

Start the client on the machine with the controller, giving the server's
address as `host:port`:

```
remoteplayer-client 192.168.0.10:5000
```

The client sends an empty state as soon as it starts, then the state of the
first joystick found after every input event. If no joystick is connected it
says so and exits. Both commands read commands from standard input: `exit`
stops them, anything else is answered with `Unknown Command`. The server prints
`New client: <address> : <port>` the first time it hears from an endpoint.

Copy every input of the first local joystick onto two emulated controllers on
the same machine (stop with Ctrl+C):

```
remoteplayer-mirror
```

Open a 1280×960 window showing a live diagram of the first connected joystick:
stick positions, face and shoulder buttons, d-pad and trigger pressure. Close
the window to quit.

```
remoteplayer-viewer
```

## Library use

`remoteplayer.emulation` holds the controller model:

- `ControllerState(buttons, lx, ly, rx, ry, lt, rt)` – a frozen dataclass;
  values outside their 16-bit or 8-bit ranges raise `ValueError`.
  `pack()` gives the little-endian wire form and `ControllerState.unpack(data)`
  reads it back (exactly `ControllerState.SIZE` bytes, otherwise `ValueError`).
- `XusbButton` and `HatDirection` – flag enums for gamepad buttons and hat bits.
- `sdl_button_to_xusb(button)` and `hat_to_xusb(hat)` – map a joystick button
  index or a single hat direction to its `XusbButton` bit (no bit if unknown).
- `AxisMotion`, `ButtonDown`, `ButtonUp`, `HatMotion` – joystick events.
- `Joystick(index)` – `update_state(event)` folds an event into `.state`.
  Right-stick axes inside the dead zone of ±8000 read as 0; the left Y axis is
  inverted.
- `EmulatedController(target, state)` – `update_state(state)` builds an
  `XusbReport` and hands it to the target; `refresh()` hands over the current
  report again. The default target is a `ReportBuffer`, which keeps every
  report in `.reports` (`.last` is the newest).

`remoteplayer.connection`:

- `UdpServer(port, controller_factory=None, host="0.0.0.0", out=None)` –
  `handle_datagram(data, endpoint)` applies one packet, `serve_forever()`
  receives until `turn_off()` is called, `num_clients()` counts the endpoints
  seen. Usable as a context manager.
- `UdpClient(host, port)` – `send_state(state)` sends one state and returns
  whether it went out; `turn_off()` / `close()` stop it. Usable as a context
  manager.

`remoteplayer.client` offers `parse_address(addr)`, `translate_event(event)`
(pygame joystick event to controller event) and
`run_commands(stream, on_exit, out)`; `remoteplayer.server` offers
`parse_port(text)`; `remoteplayer.mirror` offers `Mirror(copies=2)` with
`feed(event)`; `remoteplayer.viewer` offers `ViewerState`, `draw(surface,
state)` and the geometry helpers `scale_axis`, `trigger_alpha`,
`circle_points`, `circle_fill_lines` and `joystick_dot_rect`.

## What it does not do

- The emulated controllers are not plugged into the operating system: no
  virtual gamepad driver is used, so games on the server machine do not see
  them. The reports they produce are kept in memory only.
- The server stops receiving when a packet of the wrong size arrives.
- The client only ever sends the first joystick it finds.