# refereelink

`refereelink` is a library for the serial link to a robot competition referee
system. It decodes the payloads of the frames the referee system sends, such as
game status, robot HP, power and heat, shoot data and power-management reports.
It also builds and sends the frames that draw graphics and text on the operator's
client screen.

## Installation

```
pip install .
```

To install the test tools as well:

```
pip install ".[test]"
```

## Library overview

- `refereelink.protocol` holds the wire enums. These are `RefereeCmdId`,
  `DataCmdId`, `RobotId`, `ClientId`, `GraphOperation`, `GraphColor`,
  `GraphType`, `SentryIntention` and the power-management enums. The module also
  holds the packed structures `FrameHeader`, `InteractiveDataHeader` and
  `GraphConfig`, each with `pack()` and `from_bytes()`. The numeric fields of
  `GraphConfig` wrap to their bit widths.
- `refereelink.base` provides the frame checksums: `get_crc8`, `verify_crc8`,
  `append_crc8`, `get_crc16`, `verify_crc16` and `append_crc16`. It also provides
  `Base`, which holds the robot and client identity together with the serial port.
  `Base` has three port methods:
  - `init_serial()` opens the port. The default port is `/dev/usbReferee` at
    115200 baud. A failure to open is logged.
  - `write()` sends bytes.
  - `read_available()` returns the bytes that are waiting.

  While the port is closed, `write()` and `read_available()` do nothing.
- `refereelink.messages` has `decode(cmd_id, payload)`. It turns one frame payload
  into a list of frozen dataclass records, for example `GameStatus`,
  `GameRobotStatus`, `PowerHeatData` and `PowerManagementSampleAndStatusData`.
  Some commands carry nothing of interest, and for those the list is empty. An
  unknown command also gives an empty list, and it is logged.
- `refereelink.graph` holds `Graph`, one drawable element. It is built from a
  configuration mapping. `get_color` and `get_type` resolve colour and shape names.
- `refereelink.ui_base` holds `UiBase` and `GroupUiBase`.
  - They add, update and erase graphics.
  - They send graphs in single, double, five and seven graph frames.
  - They send character graphics.
  - They send interactive data to other robots: the sentry position, sentry map
    paths and radar map marks.

  The same module has `pack_frame(data, cmd_id)`, which builds a complete frame
  with both checksums.
- `refereelink.trigger_change_ui` holds the mode indicators for chassis, shooter,
  gimbal, target, target view angle and camera. It also holds a polygon outline
  group.
- `refereelink.flash_ui` holds the cover and spin warnings.
- `refereelink.referee_base` holds `RefereeBase`, which does three things:
  - It builds the indicators from a configuration mapping.
  - It routes robot state callbacks to the indicators.
  - It queues the graphics for adding when the right switch moves up.

  Your own loop calls `RefereeBase.add_ui()` and `RefereeBase.send_graph_queue()`.
  The second one drains the graph queue in batches.

## Example

```python
import struct

from refereelink.base import verify_crc8, verify_crc16
from refereelink.messages import GameStatus, decode
from refereelink.protocol import FrameHeader, RefereeCmdId
from refereelink.ui_base import pack_frame

payload = struct.pack("<BHQ", 0x41, 120, 0)
frame = pack_frame(payload, RefereeCmdId.GAME_STATUS_CMD)

assert frame[0] == 0xA5
assert verify_crc8(frame[:FrameHeader.SIZE]) and verify_crc16(frame)

header = FrameHeader.from_bytes(frame)
cmd_id = int.from_bytes(frame[5:7], "little")
data = frame[7:7 + header.data_length]
assert decode(cmd_id, data) == [GameStatus(1, 4, 120, 0)]
```

## What the package does not do

The package has no command and no program that runs by itself. It does not poll
the serial port, and it does not scan a raw byte stream for frames. The calling
code does that work in four steps:

1. Read bytes with `Base.read_available()`.
2. Find the `0xA5` start bytes.
3. Check each frame with `verify_crc8` and `verify_crc16`.
4. Pass each payload to `decode`.

The calling code also routes the records to a `RefereeBase` and works out the
robot's colour and client id from its robot id. The package only holds that
identity on `Base`.