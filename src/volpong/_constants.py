"""Internal constants shared across the library."""

# ------------------------------------------------------------------
# D-Bus daemon (used for AddMatch)
# ------------------------------------------------------------------

DBUS_SERVICE = "org.freedesktop.DBus"
DBUS_PATH = "/org/freedesktop/DBus"
DBUS_INTERFACE = "org.freedesktop.DBus"

PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"
PROPERTIES_CHANGED_SIGNAL = f"{PROPERTIES_INTERFACE}.PropertiesChanged"

# ------------------------------------------------------------------
# BlueZ publisher
# ------------------------------------------------------------------

BLUEZ_SERVICE = "org.bluez"
MEDIA_TRANSPORT_INTERFACE = "org.bluez.MediaTransport1"
VOLUME_PROPERTY = "Volume"

# Wire type of MediaTransport1.Volume (uint16).
VOLUME_SIGNATURE = "q"

# AVRCP absolute volume range reported by the transport.
DEVICE_VOLUME_MAX = 127
DEFAULT_VOLUME = 63
