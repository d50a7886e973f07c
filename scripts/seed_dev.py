from sqlalchemy.orm import sessionmaker

from drawwheel.db.engine import make_engine
from drawwheel.models import Base, Participant
from drawwheel.store import actions as act
from drawwheel.workflows import bootstrap_store, import_participants, import_prizes, import_tasks
from drawwheel.utils import assign_color, generate_id


def main() -> None:
    """Seed the development database with a demo project and team."""
    engine = make_engine()

    # Start from an empty key-value table.
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine, expire_on_commit=False)

    store = bootstrap_store(Session)

    # Project with a roster, tasks, and prizes
    store.dispatch(act.CreateProject(name="Sprint Review", description="Weekly demo rota"))
    import_participants(store, "Ana\nBruno\nCarla\nDiego\nEva")
    import_tasks(
        store,
        "Revisar PR|Code review of the open pull requests|2\n"
        "Deploy|Ship to staging|1\n"
        "Demo|Present the sprint outcome|3",
    )
    import_prizes(store, "Coffee voucher, Sticker pack, Extra day off")
    store.dispatch(act.UpdateProjectSettings(animation_duration=2000))

    # Reusable team
    store.dispatch(act.AddTeam(name="Platform", description="Infra and tooling"))
    team = store.state.global_teams[-1]
    for name in ("Fernanda", "Gabriel"):
        member = Participant(id=generate_id(), name=name, color=assign_color())
        store.dispatch(act.AddMemberToTeam(team_id=team.id, participant=member))

    # Second project, populated from the team
    store.dispatch(act.CreateProject(name="Retro"))
    store.dispatch(act.ImportTeamToProject(team_id=team.id))

    for project in store.state.projects:
        print(
            f"Seeded '{project.name}': {len(project.participants)} participants, "
            f"{len(project.tasks)} tasks, {len(project.prizes)} prizes"
        )
    engine.dispose()


if __name__ == "__main__":
    main()
