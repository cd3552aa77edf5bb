from typing import Literal

from pydantic import BaseModel, Field

AlarmSound = Literal["Wood", "Digital", "Bell", "Chime", "None"]
TickingSound = Literal["None", "Clock", "Metronome"]
Theme = Literal["red", "blue", "green", "purple"]


class TimerSettings(BaseModel):
    pomodoro: int = Field(default=25, ge=1, le=120)
    short_break: int = Field(default=5, ge=1, le=30)
    long_break: int = Field(default=15, ge=1, le=60)
    long_break_interval: int = Field(default=4, ge=1, le=10)
    auto_start_breaks: bool = False
    auto_start_pomodoros: bool = False


class TaskSettings(BaseModel):
    auto_check_tasks: bool = False
    auto_switch_tasks: bool = True


class SoundSettings(BaseModel):
    alarm_sound: AlarmSound = "Wood"
    alarm_volume: int = Field(default=50, ge=0, le=100)
    alarm_repeat: int = Field(default=1, ge=1, le=10)
    ticking_sound: TickingSound = "None"


class NotificationSettings(BaseModel):
    enabled: bool = True
    browser_notifications: bool = True


class UserSettings(BaseModel):
    timer: TimerSettings = Field(default_factory=TimerSettings)
    task: TaskSettings = Field(default_factory=TaskSettings)
    sound: SoundSettings = Field(default_factory=SoundSettings)
    theme: Theme = "red"
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)


# Partial counterparts for PUT /settings: only the fields sent are applied.


class TimerSettingsUpdate(BaseModel):
    pomodoro: int | None = Field(default=None, ge=1, le=120)
    short_break: int | None = Field(default=None, ge=1, le=30)
    long_break: int | None = Field(default=None, ge=1, le=60)
    long_break_interval: int | None = Field(default=None, ge=1, le=10)
    auto_start_breaks: bool | None = None
    auto_start_pomodoros: bool | None = None


class TaskSettingsUpdate(BaseModel):
    auto_check_tasks: bool | None = None
    auto_switch_tasks: bool | None = None


class SoundSettingsUpdate(BaseModel):
    alarm_sound: AlarmSound | None = None
    alarm_volume: int | None = Field(default=None, ge=0, le=100)
    alarm_repeat: int | None = Field(default=None, ge=1, le=10)
    ticking_sound: TickingSound | None = None


class NotificationSettingsUpdate(BaseModel):
    enabled: bool | None = None
    browser_notifications: bool | None = None


class SettingsUpdate(BaseModel):
    timer: TimerSettingsUpdate | None = None
    task: TaskSettingsUpdate | None = None
    sound: SoundSettingsUpdate | None = None
    theme: Theme | None = None
    notifications: NotificationSettingsUpdate | None = None
