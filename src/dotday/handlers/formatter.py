from typing import Sequence

from icalendar import Calendar

from ..models import Day, Event


def _time_range(event: Event) -> str:
    if event.all_day:
        return "all day"
    end = event.end.strftime('%H:%M')
    if event.end.date() != event.start.date():
        end = event.end.strftime('%Y-%m-%d %H:%M')
    return f"{event.start:%H:%M} - {end}"


class Handler:
    """Handler class for a readable overview of the parsed days"""

    def __call__(self, calendar: Calendar, days: Sequence[Day]) -> None:
        print(f"\n{'='*80}")
        print(f"📅  {calendar.get('X-WR-CALNAME', 'DOTDAY')}")
        print(f"{'='*80}\n")

        count = 0
        for day in days:
            heading = f"{day.date:%A %Y-%m-%d}"
            if day.title:
                heading += f" | {day.title}"
            print(f"{heading}  ({day.source_id})")
            print(f"{'─' * 80}")

            for event in day.events:
                count += 1
                print(f"[{count:02d}] {_time_range(event):<24} {event.title}")

                fields = [
                    ('Reminder', event.reminder.isoformat() if event.reminder else ''),
                    ('Location', event.location),
                    ('Tags', ', '.join(event.tags)),
                    ('People', ', '.join(event.people)),
                    ('Attachments', ', '.join(event.attachments)),
                ]
                for key, value in fields:
                    if value:
                        print(f"  🔹 {key:<12} : {value}")

                for line in event.description.splitlines():
                    print(f"     │ {line}")

            print(flush=True)

        if count == 0:
            print("No events found.", flush=True)
