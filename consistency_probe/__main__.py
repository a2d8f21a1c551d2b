from consistency_probe.cli import main

main()
