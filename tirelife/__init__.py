#!/usr/bin/env python
# -*- coding: utf-8 -*-
# @Date    : 2026-02-11 08:05:12
# @Author  : Tom Brandherm (https://github.com/tombo92)
# @Link    : https://github.com/tombo92/TireStorageManager
"""
Tire lifecycle: tire sets, mileage and warranty accounting
"""
from tirelife.config import VERSION

__version__ = VERSION
