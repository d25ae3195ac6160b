# runepod

Building blocks for a vision-guided turret controller: a ballistic pitch
solver, CRC-8 checked packets for the serial link to the gimbal controller,
serial device discovery, camera frame sources, and managers that run all of
these in background threads.

## Install

```
pip install .
```

## Modules

### `runepod.ballistics`

Pitch solving with a simple air-drag model (drag coefficient 0.019,
gravity 9.78 m/s², default muzzle speed 24 m/s).

- `bullet_model(depth, speed, pitch)` – height reached and flight time for a
  shot at `depth` metres with `pitch` in radians; returns `(height, time)`.
- `get_pitch(depth, height, speed)` – iteratively (at most 20 steps, tolerance
  1 mm) finds the pitch in radians that hits `height` at `depth`; returns
  `(pitch, time)`.
- `transform(depth, height, speed=24.0)` – takes millimetres in the camera
  frame (y pointing down) and returns the negated pitch in radians and the
  flight time.
- `adjust_pitch(distance, pitch, speed=24.0)` – drag-free launch angle in
  degrees for a target seen at `pitch` degrees and `distance` millimetres.
  Raises `ValueError` if the distance is zero or the target is out of range.

### `runepod.messages`

Drawing on `PIL.Image` objects (each returns the image it drew on):

- `put_text(image, info, point)` – text with its baseline-left corner at `point`.
- `line(image, point1, point2)` – a yellow line, 2 px wide.
- `circle(image, point, color=None)` – a filled yellow dot without `color`;
  otherwise a ring: `1` green, `2` red, anything else yellow.

Timing: `time_point()` (monotonic seconds), `time_between(start, end)`,
`time_since(start)`, `fps_from_time(time)` (infinite for zero) and
`fps_since(start)`.

### `runepod.config`

`load_config(path)` reads a YAML mapping. A leading `%YAML:1.0` header is
skipped and `!!opencv-matrix` nodes become numpy arrays. An empty file gives
`{}`; a document that is not a mapping raises `ValueError`.

### `runepod.packets`

- `crc8(data)` – CRC-8 with the controller's table, initial value `0xFF`.
- `ColorType` – `RED` or `BLUE`.
- `DataPacket(gun_id, head, tail)` – base packet with `send_data(port, stop)`
  and `receive_data(port, stop)` loops that run until the `threading.Event`
  `stop` is set; the base class has nothing to send or receive and returns at once.
- `SendDataPacket` – fields `pitch`, `yaw`, `distance`, `armor_id`,
  `if_shoot`, `if_real_shoot`, `if_first_armor`.
  `encode()` gives the 18-byte frame: head, pitch, yaw, distance (little-endian
  float32), the four flag bytes, tail; out-of-range fields raise `ValueError`.
  `update_shoot_mode()` clears `if_real_shoot` when `|pitch| >= 1.2`, and sets
  it when `if_shoot == 1` and yaw, pitch and distance fall within one of the
  distance bands 0–1.7, 1.7–3.5, 3.5–5.0 and 5.0–10.5.
  `send_data(port, stop)` writes the current frame repeatedly.
- `ReceiveDataPacket` – fields `gain_pitch`, `gain_yaw`, `color`, `mode`.
  `decode(data)` finds the head byte and reads a 13-byte frame: head, two
  float32 gains, colour byte, mode byte, CRC-8 of those 10 bytes, tail. It
  returns `False` and leaves the fields alone if the frame is short or fails
  the check. `receive_data(port, stop)` reads 14-byte chunks and decodes them.
  `color_mode()` gives `ColorType.RED` for a non-zero colour, else `BLUE`;
  `mode_selection()` gives the mode as an int.
- `load_send_packet(gun_id, config_dir)` and
  `load_receive_packet(gun_id, config_dir)` read `Head` and `Tail` from the
  `SendPacket` or `ReceivePacket` section of `<config_dir>/<gun_id>.yml`
  (default directory `../config/packet`).

A port is anything with `write(bytes)` and `read(size)`, such as a
`serial.Serial`.

### `runepod.serial_link`

- `list_devices(directory="/dev", keyword="ttyACM")` – sorted names of
  matching entries; raises `OSError` if the directory cannot be read.
- `SerialPort(directory, keyword, opener, max_attempts, retry_delay)`:
  - `init(config_path="../config/config.yml")` reads `Settings.BaudSpeed`,
    scans for devices, then opens and configures one (8 data bits, 1 stop bit,
    no parity), retrying up to `max_attempts` times (forever when `None`).
    Returns whether it succeeded.
  - `update_device_list()`, `open_device()`, `configure(databits, stopbits,
    parity)` (7/8 data bits, 1/2 stop bits, parity `N`, `O`, `E` or `S` for
    none; other values raise `ValueError`, no open port raises
    `RuntimeError`), and `close()`.
  - The open port is `port`, its path `device_path`.
- `get_instance()` – the process-wide `SerialPort`.

### `runepod.camera`

- `Camera(config, camera_id)` reads `CameraMatrix` (9 values), `DistCoeffs`
  (5 values), `CameraType` and `TimeOff` (milliseconds between frames).
  `project(point)` maps a 3-D camera-frame point to pixel coordinates
  (`ValueError` when z is 0). `clone_src()` copies the current frame or raises
  `RuntimeError` if there is none. `start_camera()` and `update_src(stop)`
  drive capture; the base class supplies no frames.
- `VideoCamera(config, camera_id, video_dir="../resource/video")` plays
  `FileName` from `video_dir` as RGB numpy frames through imageio.
  `start_camera()` raises `FileNotFoundError` for a missing file;
  `update_src(stop)` raises `RuntimeError` before it is started and ends when
  the video ends, leaving no current frame. Which video formats can be read
  depends on the imageio plugins installed.

### `runepod.managers`

- `CameraManager` – `add_camera`, `load_tasks(stop)` (starts each camera, then
  runs its `update_src` in a daemon thread), `size()`.
- `ModuleManager` – `add_module`, `load_tasks()` (runs each module's `run()`
  in a daemon thread), `size()`.
- `PacketManager` – `add_packet`, `load_send_tasks(port, stop)`,
  `load_receive_tasks(port, stop)`, `size()`.

Each `load_*` method returns the started threads; `len()` works on every manager.

## Example

```python
from runepod.ballistics import transform
from runepod.packets import SendDataPacket

pitch, flight_time = transform(5000.0, 300.0, 24.0)   # millimetres in, radians out

packet = SendDataPacket(gun_id=0, head=0xA5, tail=0x5A)
packet.pitch = 0.5
packet.yaw = 1.0
packet.distance = 2.0
packet.if_shoot = 1
packet.update_shoot_mode()
frame = packet.encode()      # 18 bytes ready for the serial link
```

## What it does not do

There is no command or main program: wiring cameras, modules and packets
together is left to the caller. The package does no target detection,
tracking or motion prediction, has no drivers for industrial cameras, and
cannot capture live from a device; frames come only from video files.

## Tests

```
pip install ".[test]"
pytest
```