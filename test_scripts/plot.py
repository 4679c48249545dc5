import zmq
import matplotlib.pyplot as plt
from collections import deque

FIELDS = [
    ("boom_percent", "Boom (%)"),
    ("cable_length", "Cable (m)"),
    ("rotation_degrees", "Rotation (deg)"),
    ("trolley_position", "Trolley (m)"),
]

context = zmq.Context()
socket = context.socket(zmq.SUB)
socket.connect("tcp://localhost:5555")
socket.setsockopt_string(zmq.SUBSCRIBE, "")

data = {name: deque(maxlen=600) for name, _ in FIELDS}
t = deque(maxlen=600)
t0 = None

plt.ion()
fig, axs = plt.subplots(len(FIELDS), 1, figsize=(10, 12))
lines = {}

for ax, (name, label) in zip(axs, FIELDS):
    line, = ax.plot([], [], label=label, color="b")
    ax.set_ylabel(label)
    ax.legend()
    ax.grid()
    lines[name] = line

axs[-1].set_xlabel("Time (s)")

while True:
    msg = socket.recv_json()
    if t0 is None:
        t0 = msg["timestamp"]
    t.append(msg["timestamp"] - t0)
    for name, _ in FIELDS:
        data[name].append(msg[name])

    for ax, (name, _) in zip(axs, FIELDS):
        lines[name].set_data(t, data[name])
        ax.relim()
        ax.autoscale_view()

    plt.pause(0.01)
