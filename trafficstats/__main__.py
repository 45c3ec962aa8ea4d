from trafficstats.cli import main

main()
