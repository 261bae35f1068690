#
# -----------------------------------------------------------
# Name: configReader
# Purpose: Basic Configreader which lets you read and access the .conf file of the laser line extraction
# Version 0.3
#
# -----------------------------------------------------------

from ie_LaserLine.Utility.ieErrors import ConfigException


class configReader:

    def __init__(self, configFile: str, listFields: int = 1):
        self.configFile = str(configFile)
        self.content = {}
        try:
            f = open(self.configFile, "r", encoding="utf-8")
        except OSError as e:
            raise ConfigException(f"Config file could not be opened: {self.configFile} ({e.strerror})") from e
        with f:
            for line in f:
                line = line.split("#")[0]  # allows comments in the config file
                cont = line.replace("\n", "").split("=")
                if len(cont) != 2:
                    continue  # no "=" means an info line
                key = cont[0].strip()
                liste = [item.strip() for item in cont[1].split(";")]
                if len(liste) > 1 or listFields != 1:
                    while len(liste) < listFields:
                        liste.append("")
                    self.content[key] = liste
                else:
                    self.content[key] = liste[0]

    def getInfo(self, header: str):
        return self.content.get(header)

    def getStr(self, header: str, default: str | None = None) -> str | None:
        value = self.getInfo(header)
        if value is None or value == "":
            return default
        if isinstance(value, list):
            raise ConfigException(f"{header} in {self.configFile} is a list, expected a single value")
        return value

    def getInt(self, header: str, default: int | None = None) -> int | None:
        value = self.getStr(header)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError as e:
            raise ConfigException(f"{header} in {self.configFile} is not an integer: {value!r}") from e
