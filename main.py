# main.py
from sqlalchemy import Integer, String, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column

from jobtracking import JobClient, LifecycleEvent, MemoryJobRegistry, Trackable, configure
from jobtracking.storage import create_tracking_tables


def export_widget(widget_id):
    print(f"Exporting widget {widget_id}")


class Base(DeclarativeBase):
    pass


class Widget(Trackable, Base):
    __tablename__ = "widgets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100))

    def schedule_export(self):
        return JobClient().enqueue(export_widget, self.id)


Widget.enable_tracking()
Widget.declare_scheduling(on=LifecycleEvent.AFTER_CREATE, method_name="schedule_export")


if __name__ == "__main__":
    # 1. Configure the job registry and the database
    registry = MemoryJobRegistry()
    configure(registry)
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    create_tracking_tables(engine)

    with Session(engine) as session:
        # 2. Creating a widget schedules and tracks an export job
        widget = Widget(name="sprocket")
        session.add(widget)
        session.commit()
        print(f"Tracked jobs after create: {[job.id for job in widget.tracked_jobs]}")

        # 3. Updating it replaces the job
        widget.name = "sprocket v2"
        session.commit()
        print(f"Tracked jobs after update: {[job.id for job in widget.tracked_jobs]}")
        print(f"Jobs left in the registry: {registry.job_ids()}")

        # 4. Deleting it removes its trackings
        session.delete(widget)
        session.commit()
        print("\nDemonstration finished.")
